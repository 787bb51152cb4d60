"""Citation storage embedded in the host document.

Each citation is persisted as a ``div.citation-data`` inside the data
block, with id ``csdata-<citationID>`` and the encoded citation as its
text. A document saved this way carries its own citation data and can
be reopened without any external store.

The whole-store snapshot and the demo positions only live for the
session; on reopen the store is rebuilt from the records.
"""

from __future__ import annotations

from citesync.core.constants import DATA_RECORD_ID_PREFIX, ClassName, ContainerId
from citesync.document.containers import ensure_container, ensure_data_block
from citesync.document.host import DocumentHost, DocumentNode
from citesync.schemas.citations import Citation
from citesync.storage.codec import encode_citation


def record_element_id(citation_id: str) -> str:
    """Element ID of the record for a citationID."""
    return f"{DATA_RECORD_ID_PREFIX}{citation_id}"


class DocumentCitationStorage:
    """Citation storage over the host document's data block.

    Attributes:
        document_id: Identity of the host document
    """

    def __init__(self, host: DocumentHost, document_id: str = "default") -> None:
        """Initialize storage over a host document.

        Args:
            host: Document holding the records
            document_id: Identity of the document
        """
        self._host = host
        self._document_id = document_id
        self._store: list[Citation] | None = None
        self._positions: dict[str, int] = {}

    @property
    def document_id(self) -> str:
        return self._document_id

    def _record_nodes(self) -> list[DocumentNode]:
        block = self._host.get_element_by_id(ContainerId.DATA)
        if block is None:
            return []
        return [node for node in block.children() if node.has_class(ClassName.CITATION_DATA)]

    @staticmethod
    def _record_key(node: DocumentNode) -> str:
        element_id = node.element_id or ""
        if element_id.startswith(DATA_RECORD_ID_PREFIX):
            return element_id[len(DATA_RECORD_ID_PREFIX):]
        return element_id

    def load_records(self) -> list[tuple[str, str]]:
        return [(self._record_key(node), node.inner_html) for node in self._record_nodes()]

    def save_record(self, citation_id: str, citation: Citation) -> None:
        blob = encode_citation(citation)
        node = self._host.get_element_by_id(record_element_id(citation_id))
        if node is None:
            node = self._host.create_element(
                "div",
                ensure_data_block(self._host),
                element_id=record_element_id(citation_id),
                classes=(ClassName.CITATION_DATA,),
            )
        node.set_inner_html(blob)

    def delete_record(self, citation_id: str) -> None:
        for node in self._record_nodes():
            if self._record_key(node) == citation_id:
                self._host.remove_node(node)

    def record_ids(self) -> list[str]:
        return [self._record_key(node) for node in self._record_nodes()]

    def load_store(self) -> list[Citation] | None:
        return list(self._store) if self._store is not None else None

    def save_store(self, store: list[Citation]) -> None:
        self._store = list(store)

    def load_style(self) -> str | None:
        node = self._host.get_element_by_id(ContainerId.STYLE)
        if node is None:
            return None
        style_id = node.inner_html.strip()
        return style_id or None

    def save_style(self, style_id: str) -> None:
        ensure_container(self._host, ContainerId.STYLE).set_inner_html(style_id)

    def load_positions(self) -> dict[str, int]:
        return dict(self._positions)

    def save_positions(self, positions: dict[str, int]) -> None:
        self._positions = dict(positions)

    def clear(self) -> None:
        for node in self._record_nodes():
            self._host.remove_node(node)
        self._store = None
        self._positions = {}


__all__ = ["DocumentCitationStorage", "record_element_id"]
