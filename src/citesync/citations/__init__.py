"""Citation state synchronization.

- CitationState: store, position index and mode of an open document
- reconcile / DocumentReconciler: rebuild consistent state on load
- DocumentRenderer: apply processor output to the document
- CitationSession: one document wired to its processor
"""

from citesync.citations.demo import demo_positions, restore_demo_slots
from citesync.citations.reconciler import (
    DocumentReconciler,
    ReconciliationResult,
    RepairAction,
    RepairKind,
    reconcile,
)
from citesync.citations.renderer import DocumentRenderer, LayoutPolicy
from citesync.citations.session import CitationSession
from citesync.citations.state import CitationState

__all__ = [
    "CitationSession",
    "CitationState",
    "DocumentReconciler",
    "DocumentRenderer",
    "LayoutPolicy",
    "ReconciliationResult",
    "RepairAction",
    "RepairKind",
    "demo_positions",
    "reconcile",
    "restore_demo_slots",
]
