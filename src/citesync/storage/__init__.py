"""Persisted citation data, keyed by document identity."""

from citesync.storage.codec import (
    decode_citation,
    decode_store,
    encode_citation,
    encode_store,
)
from citesync.storage.document import DocumentCitationStorage
from citesync.storage.keys import StorageKind, build_storage_key, parse_storage_key
from citesync.storage.memory import KeyValueCitationStorage
from citesync.storage.protocols import CitationStorageProtocol

__all__ = [
    "CitationStorageProtocol",
    "DocumentCitationStorage",
    "KeyValueCitationStorage",
    "StorageKind",
    "build_storage_key",
    "decode_citation",
    "decode_store",
    "encode_citation",
    "encode_store",
    "parse_storage_key",
]
