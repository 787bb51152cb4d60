"""Lazily created blocks the engine owns inside the host document.

Every block is non-editable for the host's editor and starts hidden.
"""

from citesync.core.constants import (
    BIBLIOGRAPHY_BLOCK_HTML,
    FOOTNOTES_BLOCK_HTML,
    ClassName,
    ContainerId,
)
from citesync.document.host import DocumentHost, DocumentNode


def ensure_container(
    host: DocumentHost,
    element_id: str,
    inner_html: str = "",
    before: DocumentNode | None = None,
) -> DocumentNode:
    """Return the block with the given id, creating it on first use.

    Args:
        host: Document to look in
        element_id: ID of the block
        inner_html: Initial markup for a newly created block
        before: Sibling to insert a new block in front of; appended to body otherwise

    Returns:
        The existing or newly created block
    """
    node = host.get_element_by_id(element_id)
    if node is not None:
        return node
    return host.create_element(
        "div",
        host.body(),
        element_id=element_id,
        classes=(ClassName.NON_EDITABLE,),
        attributes={"contenteditable": "false", "hidden": ""},
        inner_html=inner_html,
        before=before,
    )


def ensure_bibliography_block(host: DocumentHost) -> DocumentNode:
    """Bibliography block: heading plus the entry list."""
    return ensure_container(host, ContainerId.BIBLIOGRAPHY_BLOCK, BIBLIOGRAPHY_BLOCK_HTML)


def ensure_footnotes_block(host: DocumentHost) -> DocumentNode:
    """Footnote block, placed ahead of the bibliography block."""
    return ensure_container(
        host,
        ContainerId.FOOTNOTES_BLOCK,
        FOOTNOTES_BLOCK_HTML,
        before=host.get_element_by_id(ContainerId.BIBLIOGRAPHY_BLOCK),
    )


def ensure_data_block(host: DocumentHost) -> DocumentNode:
    """Block holding persisted citation records."""
    return ensure_container(host, ContainerId.DATA)


def ensure_all(host: DocumentHost) -> None:
    """Create the bibliography, footnote and data blocks where missing."""
    ensure_bibliography_block(host)
    ensure_footnotes_block(host)
    ensure_data_block(host)
