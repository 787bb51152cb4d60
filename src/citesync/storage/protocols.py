"""Citation storage protocol.

Persisted citation data is keyed by document identity. Implementations
choose the medium: a key-value mapping, the document itself, or a remote
store.

Pattern: Protocol duck typing
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from citesync.schemas.citations import Citation


@runtime_checkable
class CitationStorageProtocol(Protocol):
    """Persisted citation data for one document.

    Methods:
        load_records: Serialized citation blobs as (citationID, blob) pairs
        save_record: Create or update the blob for a citationID
        delete_record: Remove the blob for a citationID
        record_ids: citationIDs that have a blob
        load_store / save_store: Whole citation store snapshot
        load_style / save_style: Style chosen for the document
        load_positions / save_positions: Demo peg positions
        clear: Remove everything stored for the document
    """

    @property
    def document_id(self) -> str:
        ...

    def load_records(self) -> list[tuple[str, str]]:
        ...

    def save_record(self, citation_id: str, citation: Citation) -> None:
        ...

    def delete_record(self, citation_id: str) -> None:
        ...

    def record_ids(self) -> list[str]:
        ...

    def load_store(self) -> list[Citation] | None:
        ...

    def save_store(self, store: list[Citation]) -> None:
        ...

    def load_style(self) -> str | None:
        ...

    def save_style(self, style_id: str) -> None:
        ...

    def load_positions(self) -> dict[str, int]:
        ...

    def save_positions(self, positions: dict[str, int]) -> None:
        ...

    def clear(self) -> None:
        ...


__all__ = ["CitationStorageProtocol"]
