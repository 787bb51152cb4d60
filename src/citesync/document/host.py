"""Document host capability protocols.

The editing host owns the live document tree. The engine reaches it only
through these two protocols, so any tree (a browser DOM bridge, an HTML
file, an in-memory test double) can sit behind a session.

Pattern: Protocol duck typing
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class DocumentNode(Protocol):
    """One element of the host document.

    Methods:
        element_id: The element's id attribute, None when unset
        set_element_id: Assign the id attribute
        has_class: Class membership test
        parent_has_class: Class membership test on the parent element
        inner_html: Serialized child markup
        set_inner_html: Replace all children with parsed markup
        hidden: Whether the element carries the hidden attribute
        set_hidden: Add or remove the hidden attribute
        set_style: Replace the inline style attribute
        children: Child elements in document order
    """

    @property
    def element_id(self) -> str | None:
        ...

    def set_element_id(self, value: str) -> None:
        ...

    def has_class(self, name: str) -> bool:
        ...

    def parent_has_class(self, name: str) -> bool:
        ...

    @property
    def inner_html(self) -> str:
        ...

    def set_inner_html(self, markup: str) -> None:
        ...

    @property
    def hidden(self) -> bool:
        ...

    def set_hidden(self, hidden: bool) -> None:
        ...

    def set_style(self, style: str) -> None:
        ...

    def children(self) -> list[DocumentNode]:
        ...


@runtime_checkable
class DocumentHost(Protocol):
    """The editing host's document: lookup, creation and removal of elements.

    Methods:
        body: Root element new top-level blocks are appended to
        get_element_by_id: Lookup by id
        get_elements_by_class: Elements with a class, in document order
        create_element: Create an element under a parent
        remove_node: Detach and discard an element
    """

    def body(self) -> DocumentNode:
        ...

    def get_element_by_id(self, element_id: str) -> DocumentNode | None:
        ...

    def get_elements_by_class(
        self,
        class_name: str,
        within: DocumentNode | None = None,
    ) -> list[DocumentNode]:
        ...

    def create_element(
        self,
        tag: str,
        parent: DocumentNode,
        *,
        element_id: str | None = None,
        classes: Sequence[str] = (),
        attributes: dict[str, str] | None = None,
        inner_html: str = "",
        before: DocumentNode | None = None,
    ) -> DocumentNode:
        ...

    def remove_node(self, node: DocumentNode) -> None:
        ...


__all__ = ["DocumentHost", "DocumentNode"]
