"""Key-value citation storage.

Backs the storage protocol with any string-to-string mapping: a plain dict
in memory, a ``shelve``/``dbm`` handle, or a browser-style local storage
bridge. Keys follow build_storage_key().
"""

from __future__ import annotations

import json
import threading
from collections.abc import MutableMapping

from citesync.core.logging import get_logger
from citesync.schemas.citations import Citation
from citesync.storage.codec import decode_store, encode_citation, encode_store
from citesync.storage.keys import (
    StorageKind,
    build_storage_key,
    parse_storage_key,
)


logger = get_logger(__name__)


class KeyValueCitationStorage:
    """Citation storage over a string key-value mapping.

    Attributes:
        document_id: Identity the stored data is scoped to

    Example:
        >>> storage = KeyValueCitationStorage("paper-1")
        >>> storage.save_style("chicago-fullnote-bibliography")
        >>> storage.load_style()
        'chicago-fullnote-bibliography'
    """

    def __init__(
        self,
        document_id: str,
        backend: MutableMapping[str, str] | None = None,
    ) -> None:
        """Initialize storage for one document.

        Args:
            document_id: Identity the stored data is scoped to
            backend: Mapping to persist into; a new dict when omitted
        """
        self._document_id = document_id
        self._backend: MutableMapping[str, str] = backend if backend is not None else {}
        self._lock = threading.Lock()
        # Validate the document ID once, up front
        build_storage_key(StorageKind.STORE, document_id)

    @property
    def document_id(self) -> str:
        return self._document_id

    def _key(self, kind: StorageKind, key: str | None = None) -> str:
        if key is None:
            return build_storage_key(kind, self._document_id)
        return build_storage_key(kind, self._document_id, key)

    def _own_keys(self, kind: StorageKind) -> list[str]:
        prefix = f"{kind.value}{self._document_id}:"
        return [key for key in self._backend if key.startswith(prefix)]

    # =========================================================================
    # Per-citation records
    # =========================================================================

    def load_records(self) -> list[tuple[str, str]]:
        with self._lock:
            records = []
            for storage_key in self._own_keys(StorageKind.RECORD):
                _, _, citation_id = parse_storage_key(storage_key)
                records.append((citation_id, self._backend[storage_key]))
            return records

    def save_record(self, citation_id: str, citation: Citation) -> None:
        with self._lock:
            self._backend[self._key(StorageKind.RECORD, citation_id)] = encode_citation(citation)

    def delete_record(self, citation_id: str) -> None:
        with self._lock:
            self._backend.pop(self._key(StorageKind.RECORD, citation_id), None)

    def record_ids(self) -> list[str]:
        with self._lock:
            return [parse_storage_key(key)[2] for key in self._own_keys(StorageKind.RECORD)]

    # =========================================================================
    # Document-level values
    # =========================================================================

    def load_store(self) -> list[Citation] | None:
        with self._lock:
            payload = self._backend.get(self._key(StorageKind.STORE))
        if payload is None:
            return None
        return decode_store(payload)

    def save_store(self, store: list[Citation]) -> None:
        with self._lock:
            self._backend[self._key(StorageKind.STORE)] = encode_store(store)

    def load_style(self) -> str | None:
        with self._lock:
            return self._backend.get(self._key(StorageKind.STYLE))

    def save_style(self, style_id: str) -> None:
        with self._lock:
            self._backend[self._key(StorageKind.STYLE)] = style_id

    def load_positions(self) -> dict[str, int]:
        with self._lock:
            payload = self._backend.get(self._key(StorageKind.POSITIONS))
        if payload is None:
            return {}
        try:
            positions = json.loads(payload)
        except json.JSONDecodeError:
            positions = None
        if not isinstance(positions, dict):
            logger.warning("Discarding unreadable demo positions", document_id=self._document_id)
            return {}
        return {str(k): int(v) for k, v in positions.items()}

    def save_positions(self, positions: dict[str, int]) -> None:
        with self._lock:
            self._backend[self._key(StorageKind.POSITIONS)] = json.dumps(positions)

    def clear(self) -> None:
        with self._lock:
            for kind in StorageKind:
                for key in self._own_keys(kind):
                    del self._backend[key]


__all__ = ["KeyValueCitationStorage"]
