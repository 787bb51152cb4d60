"""Host document access: capability protocols, HTML adapter, node indexing."""

from citesync.document.host import DocumentHost, DocumentNode
from citesync.document.html import HtmlDocument, HtmlNode
from citesync.document.node_index import (
    citation_nodes,
    position_index,
    prune_node_list,
    slot_refs,
)

__all__ = [
    "DocumentHost",
    "DocumentNode",
    "HtmlDocument",
    "HtmlNode",
    "citation_nodes",
    "position_index",
    "prune_node_list",
    "slot_refs",
]
