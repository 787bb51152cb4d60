"""Demo pegs.

A demo document has no native citation markup. It carries fixed insertion
points, elements with class ``citeme``, and the position of each
citation's peg is persisted instead. On reload the citation slots are put
back into their pegs.
"""

from __future__ import annotations

from collections.abc import Mapping

from citesync.core.constants import ClassName
from citesync.core.logging import get_logger
from citesync.document.host import DocumentHost
from citesync.document.node_index import prune_node_list


logger = get_logger(__name__)


def demo_positions(host: DocumentHost) -> dict[str, int]:
    """Map each slot's citationID to the index of the peg holding it."""
    positions: dict[str, int] = {}
    pegs = prune_node_list(host.get_elements_by_class(ClassName.DEMO_PEG))
    for peg_index, peg in enumerate(pegs):
        for slot in host.get_elements_by_class(ClassName.CITATION, within=peg):
            if slot.element_id:
                positions[slot.element_id] = peg_index
    return positions


def restore_demo_slots(host: DocumentHost, positions: Mapping[str, int]) -> list[str]:
    """Re-insert citation slots into their pegs.

    Citations already present in the document are left alone.

    Args:
        host: Demo document
        positions: citationID -> peg index, as saved by demo_positions()

    Returns:
        citationIDs whose slots were re-inserted, in peg order
    """
    pegs = prune_node_list(host.get_elements_by_class(ClassName.DEMO_PEG))
    restored = []
    for citation_id, peg_index in sorted(positions.items(), key=lambda item: item[1]):
        if host.get_element_by_id(citation_id) is not None:
            continue
        if not 0 <= peg_index < len(pegs):
            logger.warning("No peg at stored position", citation_id=citation_id, position=peg_index)
            continue
        host.create_element(
            "span",
            pegs[peg_index],
            element_id=citation_id,
            classes=(ClassName.CITATION,),
        )
        restored.append(citation_id)
    return restored


__all__ = ["demo_positions", "restore_demo_slots"]
