"""Document reconciliation ("spoof").

Brings a freshly opened document into the state it would have been in
had it been saved properly: every slot carries a citationID, the citation
store is ordered like the slots, and persisted records that no slot
refers to are gone.

Document slot order is authoritative. Repairs get more destructive as
consistency gets worse:

1. persisted citations with no slot are dropped;
2. persisted records with no slot are purged from storage;
3. when the store still does not match the slots one to one, everything
   is discarded and the slots are removed from the document.

None of these raise. Each logs a warning and is reported back as a
RepairAction.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from citesync.citations.state import CitationState
from citesync.core.constants import GENERATED_ID_PREFIX, ClassName
from citesync.core.exceptions import RecordDecodeError
from citesync.core.logging import get_logger
from citesync.document.host import DocumentHost, DocumentNode
from citesync.document.node_index import citation_nodes, slot_refs
from citesync.schemas.citations import Citation, Mode, SlotRef
from citesync.storage.codec import decode_citation
from citesync.storage.protocols import CitationStorageProtocol


logger = get_logger(__name__)


class RepairKind(str, Enum):
    """Consistency repairs the reconciler can make."""

    DROP_UNDECODABLE_RECORD = "drop_undecodable_record"
    DROP_ORPHAN_CITATION = "drop_orphan_citation"
    PURGE_ORPHAN_RECORD = "purge_orphan_record"
    DUPLICATE_POSITION = "duplicate_position"
    FULL_RESET = "full_reset"


@dataclass(frozen=True)
class RepairAction:
    """One repair made during a reconciliation pass."""

    kind: RepairKind
    citation_id: str | None = None
    detail: str = ""


@dataclass
class ReconciliationResult:
    """Outcome of a reconciliation pass.

    Attributes:
        store: Citations ordered like the slots
        position_index: citationID -> slot ordinal
        mode: Mode carried through the pass
        repairs: Repairs made, in the order they were made
        purge_record_ids: Persisted records to delete
        reset: True when the store was discarded and slots must be removed
    """

    store: list[Citation]
    position_index: dict[str, int]
    mode: Mode
    repairs: list[RepairAction] = field(default_factory=list)
    purge_record_ids: list[str] = field(default_factory=list)
    reset: bool = False

    @property
    def warnings(self) -> list[RepairAction]:
        """Repairs short of a full reset."""
        return [r for r in self.repairs if r.kind is not RepairKind.FULL_RESET]


def reconcile(
    slots: Sequence[SlotRef],
    records: Sequence[Citation],
    mode: Mode,
    record_ids: Iterable[str] = (),
) -> ReconciliationResult:
    """Derive a consistent (store, position index, mode) from slots and persisted data.

    Pure: touches neither the document nor storage. The caller applies
    ``purge_record_ids`` and, when ``reset`` is set, removes the slots.

    Args:
        slots: Citation slots in document order
        records: Persisted citations, in any order
        mode: Current mode
        record_ids: IDs of persisted per-citation records

    Returns:
        ReconciliationResult
    """
    repairs: list[RepairAction] = []
    position_index = {slot.citation_id: slot.index for slot in slots if slot.citation_id}

    survivors: list[tuple[int, Citation]] = []
    for citation in records:
        position = position_index.get(citation.citationID) if citation.citationID else None
        if position is None:
            logger.warning(
                "Invalid state data, removing citation record with no slot",
                citation_id=citation.citationID,
            )
            repairs.append(RepairAction(RepairKind.DROP_ORPHAN_CITATION, citation.citationID))
            continue
        survivors.append((position, citation))

    survivors.sort(key=lambda pair: pair[0])
    duplicate = next(
        (
            current
            for previous, current in zip(survivors, survivors[1:])
            if previous[0] == current[0]
        ),
        None,
    )
    if duplicate is not None:
        logger.warning(
            "Two citation records claim the same slot",
            citation_id=duplicate[1].citationID,
            position=duplicate[0],
        )
        repairs.append(
            RepairAction(RepairKind.DUPLICATE_POSITION, duplicate[1].citationID, f"position {duplicate[0]}")
        )
    store = [citation for _, citation in survivors]

    purge_record_ids: list[str] = []
    all_record_ids = list(record_ids)
    for record_id in all_record_ids:
        if record_id not in position_index:
            logger.warning("Purging citation data with no slot", citation_id=record_id)
            repairs.append(RepairAction(RepairKind.PURGE_ORPHAN_RECORD, record_id))
            purge_record_ids.append(record_id)

    if duplicate is not None or len(store) != len(slots):
        logger.warning(
            "Citation slot and citation record counts do not match, removing citations",
            slots=len(slots),
            records=len(store),
        )
        repairs.append(
            RepairAction(RepairKind.FULL_RESET, detail=f"{len(slots)} slots, {len(store)} records")
        )
        purge_record_ids.extend(rid for rid in all_record_ids if rid not in purge_record_ids)
        return ReconciliationResult(
            store=[],
            position_index={},
            mode=mode,
            repairs=repairs,
            purge_record_ids=purge_record_ids,
            reset=True,
        )

    return ReconciliationResult(
        store=store,
        position_index=position_index,
        mode=mode,
        repairs=repairs,
        purge_record_ids=purge_record_ids,
    )


def generate_citation_id() -> str:
    """New citationID for a slot that has none."""
    return f"{GENERATED_ID_PREFIX}{uuid.uuid4().hex}"


class DocumentReconciler:
    """Runs reconciliation against a live host document and its storage.

    Example:
        >>> reconciler = DocumentReconciler(host, storage, state)
        >>> result = reconciler.spoof()
        >>> state.store == result.store
        True
    """

    def __init__(
        self,
        host: DocumentHost,
        storage: CitationStorageProtocol,
        state: CitationState,
    ) -> None:
        self._host = host
        self._storage = storage
        self._state = state

    def _assign_missing_ids(self, nodes: Sequence[DocumentNode]) -> None:
        for node in nodes:
            if not node.element_id:
                citation_id = generate_citation_id()
                logger.debug("Assigning citationID to unidentified slot", citation_id=citation_id)
                node.set_element_id(citation_id)

    def _load_persisted(self) -> tuple[list[Citation], list[RepairAction]]:
        """Load the stored citations, dropping any that cannot be decoded."""
        try:
            store = self._storage.load_store()
        except RecordDecodeError as e:
            logger.warning("Ignoring unreadable citation store snapshot", error=str(e))
            store = None
        if store is not None:
            return store, []

        citations: list[Citation] = []
        repairs: list[RepairAction] = []
        for record_id, blob in self._storage.load_records():
            try:
                citations.append(decode_citation(blob, record_key=record_id))
            except RecordDecodeError as e:
                logger.warning("Dropping undecodable citation data", citation_id=record_id, error=str(e))
                repairs.append(RepairAction(RepairKind.DROP_UNDECODABLE_RECORD, record_id))
                self._storage.delete_record(record_id)
        return citations, repairs

    def spoof(self) -> ReconciliationResult:
        """Reconcile the document with persisted data and update the shared state.

        Returns:
            ReconciliationResult describing the reconciled state and repairs made
        """
        nodes = citation_nodes(self._host)
        self._assign_missing_ids(nodes)

        style_id = self._storage.load_style()
        if style_id:
            self._state.style_id = style_id

        citations, decode_repairs = self._load_persisted()
        result = reconcile(
            slot_refs(nodes),
            citations,
            self._state.mode,
            record_ids=self._storage.record_ids(),
        )
        result.repairs[:0] = decode_repairs

        for record_id in result.purge_record_ids:
            self._storage.delete_record(record_id)
        if result.reset:
            for node in self._host.get_elements_by_class(ClassName.CITATION):
                self._host.remove_node(node)
            self._storage.save_store([])
        elif result.repairs:
            self._storage.save_store(result.store)

        self._state.replace(result.store, result.position_index)
        return result


__all__ = [
    "DocumentReconciler",
    "ReconciliationResult",
    "RepairAction",
    "RepairKind",
    "generate_citation_id",
    "reconcile",
]
