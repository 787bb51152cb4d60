"""Citation node indexing.

The editing host keeps transient copies of selected content in offscreen
containers. Those copies carry the same classes as the real nodes and must
not be counted when slots are numbered.
"""

from collections.abc import Iterable

from citesync.core.constants import ClassName
from citesync.document.host import DocumentHost, DocumentNode
from citesync.schemas.citations import SlotRef


def prune_node_list(nodes: Iterable[DocumentNode]) -> list[DocumentNode]:
    """Drop nodes that live inside a host offscreen container.

    Args:
        nodes: Nodes in document order

    Returns:
        The remaining nodes, order preserved
    """
    return [node for node in nodes if not node.parent_has_class(ClassName.OFFSCREEN)]


def citation_nodes(host: DocumentHost) -> list[DocumentNode]:
    """Return the document's citation slots in document order."""
    return prune_node_list(host.get_elements_by_class(ClassName.CITATION))


def slot_refs(nodes: Iterable[DocumentNode]) -> list[SlotRef]:
    """Build the ordered slot list the reconciler works on."""
    return [SlotRef(index, node.element_id) for index, node in enumerate(nodes)]


def position_index(nodes: Iterable[DocumentNode]) -> dict[str, int]:
    """Map each slot's citationID to its ordinal; slots without an ID are skipped."""
    return {
        node.element_id: index
        for index, node in enumerate(nodes)
        if node.element_id
    }
