"""HTML document host backed by BeautifulSoup.

Adapts a parsed HTML document to the DocumentHost / DocumentNode
protocols. Used for documents persisted as HTML and by the tests.
"""

from __future__ import annotations

from collections.abc import Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag


PARSER = "html.parser"


def _class_list(tag: Tag) -> list[str]:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        return classes.split()
    return list(classes)


class HtmlNode:
    """DocumentNode over a BeautifulSoup Tag.

    Two HtmlNode wrappers are equal when they wrap the same Tag object;
    Tag's own equality is structural and would conflate identical siblings.
    """

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    @property
    def tag(self) -> Tag:
        """Return the wrapped BeautifulSoup Tag."""
        return self._tag

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HtmlNode):
            return NotImplemented
        return self._tag is other._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        return f"HtmlNode(<{self._tag.name} id={self.element_id!r}>)"

    @property
    def element_id(self) -> str | None:
        value = self._tag.get("id")
        return str(value) if value else None

    def set_element_id(self, value: str) -> None:
        self._tag["id"] = value

    def has_class(self, name: str) -> bool:
        return name in _class_list(self._tag)

    def parent_has_class(self, name: str) -> bool:
        parent = self._tag.parent
        if parent is None or not isinstance(parent, Tag):
            return False
        return name in _class_list(parent)

    @property
    def inner_html(self) -> str:
        return self._tag.decode_contents()

    def set_inner_html(self, markup: str) -> None:
        self._tag.clear()
        fragment = BeautifulSoup(markup, PARSER)
        for child in list(fragment.contents):
            self._tag.append(child.extract())

    @property
    def text(self) -> str:
        """Return the element's text content."""
        return self._tag.get_text()

    @property
    def hidden(self) -> bool:
        return self._tag.has_attr("hidden")

    def set_hidden(self, hidden: bool) -> None:
        if hidden:
            self._tag["hidden"] = ""
        elif self._tag.has_attr("hidden"):
            del self._tag["hidden"]

    @property
    def style(self) -> str | None:
        """Return the inline style attribute."""
        value = self._tag.get("style")
        return str(value) if value is not None else None

    def set_style(self, style: str) -> None:
        self._tag["style"] = style

    def get_attribute(self, name: str) -> str | None:
        """Return an attribute value, None when absent."""
        value = self._tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def children(self) -> list[HtmlNode]:
        return [HtmlNode(child) for child in self._tag.children if isinstance(child, Tag)]


class HtmlDocument:
    """DocumentHost over a parsed HTML document.

    Example:
        >>> doc = HtmlDocument.from_html('<p>See <span class="citation"></span>.</p>')
        >>> len(doc.get_elements_by_class("citation"))
        1
    """

    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup

    @classmethod
    def from_html(cls, markup: str) -> HtmlDocument:
        """Parse markup into a document."""
        return cls(BeautifulSoup(markup, PARSER))

    def to_html(self) -> str:
        """Serialize the document back to markup."""
        return str(self._soup)

    def body(self) -> HtmlNode:
        body = self._soup.body
        return HtmlNode(body if body is not None else self._soup)

    def get_element_by_id(self, element_id: str) -> HtmlNode | None:
        tag = self._soup.find(id=element_id)
        return HtmlNode(tag) if isinstance(tag, Tag) else None

    def get_elements_by_class(
        self,
        class_name: str,
        within: HtmlNode | None = None,
    ) -> list[HtmlNode]:
        root: Tag = within.tag if within is not None else self._soup
        return [
            HtmlNode(tag)
            for tag in root.find_all(True)
            if class_name in _class_list(tag)
        ]

    def create_element(
        self,
        tag: str,
        parent: HtmlNode,
        *,
        element_id: str | None = None,
        classes: Sequence[str] = (),
        attributes: dict[str, str] | None = None,
        inner_html: str = "",
        before: HtmlNode | None = None,
    ) -> HtmlNode:
        new_tag = self._soup.new_tag(tag)
        if element_id is not None:
            new_tag["id"] = element_id
        if classes:
            new_tag["class"] = list(classes)
        for name, value in (attributes or {}).items():
            new_tag[name] = value
        if before is not None and before.tag.parent is parent.tag:
            before.tag.insert_before(new_tag)
        else:
            parent.tag.append(new_tag)
        node = HtmlNode(new_tag)
        if inner_html:
            node.set_inner_html(inner_html)
        return node

    def remove_node(self, node: HtmlNode) -> None:
        node.tag.decompose()


__all__ = ["HtmlDocument", "HtmlNode"]
