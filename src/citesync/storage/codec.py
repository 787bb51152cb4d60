"""Serialization of citation records for persistence.

A persisted citation is the base64 encoding of its JSON, so that it can
sit as plain text inside a document element or a string-valued store.
"""

import base64
import binascii
import json

from pydantic import ValidationError

from citesync.core.exceptions import RecordDecodeError
from citesync.schemas.citations import Citation


def encode_citation(citation: Citation) -> str:
    """Serialize a citation to its persisted form."""
    payload = citation.model_dump_json(exclude_none=True)
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def decode_citation(blob: str, record_key: str | None = None) -> Citation:
    """Restore a citation from its persisted form.

    Args:
        blob: Base64-encoded JSON
        record_key: Key the blob was stored under, for error reporting

    Returns:
        The decoded Citation

    Raises:
        RecordDecodeError: If the blob is not base64 JSON of a citation object
    """
    try:
        payload = base64.b64decode(blob.strip(), validate=True).decode("utf-8")
        return Citation.model_validate(json.loads(payload))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        raise RecordDecodeError(
            f"Cannot decode persisted citation: {e}",
            record_key=record_key,
            cause=e,
        ) from e


def encode_store(store: list[Citation]) -> str:
    """Serialize a whole citation store as a JSON array."""
    return json.dumps([c.model_dump(mode="json", exclude_none=True) for c in store])


def decode_store(payload: str) -> list[Citation]:
    """Restore a citation store serialized by encode_store().

    Raises:
        RecordDecodeError: If the payload is not a JSON array of citations
    """
    try:
        data = json.loads(payload)
        if not isinstance(data, list):
            raise RecordDecodeError("Persisted citation store is not a list")
        return [Citation.model_validate(item) for item in data]
    except (json.JSONDecodeError, ValidationError) as e:
        raise RecordDecodeError(f"Cannot decode persisted citation store: {e}", cause=e) from e
