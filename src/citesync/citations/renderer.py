"""Document renderer.

Applies processor output to the host document:
- slot identities and texts, as footnote marks or inline text
- the footnote block, regenerated from the slots on every pass
- the bibliography block and its layout hints
- per-citation records in storage

HTML has no native binding between a footnote marker and its note, so in
note mode each slot keeps its note text in a hidden span next to the
marker. The footnote block is rebuilt from those spans, in slot order.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from citesync.citations.state import CitationState
from citesync.core.constants import (
    BIBLIOGRAPHY_BLOCK_HTML,
    DEFAULT_CONTAINER_WIDTH_PX,
    MAX_OFFSET_UNIT_PX,
    RIGHT_INLINE_GUTTER_PX,
    ClassName,
    ContainerId,
    LayoutStyle,
)
from citesync.core.logging import get_logger
from citesync.document.containers import (
    ensure_all,
    ensure_bibliography_block,
    ensure_footnotes_block,
)
from citesync.document.host import DocumentHost, DocumentNode
from citesync.document.node_index import citation_nodes, position_index
from citesync.schemas.citations import Bibliography, BibliographyLayout, Mode, RenderEntry
from citesync.storage.protocols import CitationStorageProtocol


logger = get_logger(__name__)


class LayoutPolicy(str, Enum):
    """Bibliography layout applied by a render pass. Exactly one per pass."""

    NONE = "none"
    HANGING_INDENT = "hanging_indent"
    SECOND_FIELD_ALIGN = "second_field_align"
    DEFAULT = "default"


def css_number(value: float) -> str:
    """Format a number for CSS: no trailing ``.0``."""
    return f"{value:g}"


def note_markup(number: int, text: str) -> str:
    """Slot content in note mode: visible marker plus hidden note text."""
    return (
        f'<span class="{ClassName.FOOTNOTE_MARK}">{number}</span>'
        f'<span hidden="true">{text}</span>'
    )


def footnote_markup(number: int, text: str) -> str:
    """Body of one entry in the footnote block."""
    return (
        f'<span class="{ClassName.FOOTNOTE}">'
        f'<span class="{ClassName.FOOTNOTE_NUMBER}">{number}</span>'
        f'<span class="{ClassName.FOOTNOTE_TEXT}">{text}</span>'
        "</span>"
    )


class DocumentRenderer:
    """Writes citation and bibliography output into the host document.

    Attributes:
        container_width: Assumed bibliography width in px, used instead of
            the width the host reports
    """

    def __init__(
        self,
        host: DocumentHost,
        storage: CitationStorageProtocol,
        state: CitationState,
        container_width: int = DEFAULT_CONTAINER_WIDTH_PX,
    ) -> None:
        self._host = host
        self._storage = storage
        self._state = state
        self.container_width = container_width

    # =========================================================================
    # Citations
    # =========================================================================

    def set_citations(self, mode: Mode, data: Sequence[RenderEntry]) -> None:
        """Update slots from processor output and regenerate the footnotes.

        Args:
            mode: Mode of the current style
            data: Citations to update, as (index, text, citationID)
        """
        ensure_all(self._host)

        nodes = citation_nodes(self._host)
        entries = self._bind_identities(nodes, data)
        self._state.reindex(position_index(nodes))
        self._persist_records(entries)

        by_id = {node.element_id: node for node in nodes if node.element_id}
        if mode is Mode.NOTE:
            self._render_notes(nodes, by_id, entries)
        else:
            self._render_in_text(by_id, entries)

    def _bind_identities(
        self,
        nodes: Sequence[DocumentNode],
        data: Sequence[RenderEntry],
    ) -> list[RenderEntry]:
        """Give each addressed slot its citationID; never overwrite an existing one."""
        entries = []
        for entry in data:
            if not 0 <= entry.index < len(nodes):
                logger.warning(
                    "Skipping citation output for a slot not in the document",
                    index=entry.index,
                    citation_id=entry.citation_id,
                    slots=len(nodes),
                )
                continue
            node = nodes[entry.index]
            if not node.element_id:
                node.set_element_id(entry.citation_id)
            entries.append(entry)
        return entries

    def _persist_records(self, entries: Sequence[RenderEntry]) -> None:
        for entry in entries:
            citation = self._state.citation_for(entry.citation_id)
            if citation is None:
                logger.warning("No stored citation to persist", citation_id=entry.citation_id)
                continue
            self._storage.save_record(entry.citation_id, citation)

    def _render_notes(
        self,
        nodes: Sequence[DocumentNode],
        by_id: dict[str, DocumentNode],
        entries: Sequence[RenderEntry],
    ) -> None:
        footnotes_block = ensure_footnotes_block(self._host)
        footnotes_block.set_hidden(len(nodes) == 0)

        for entry in entries:
            node = by_id.get(entry.citation_id)
            if node is None:
                logger.warning("No slot carries citationID", citation_id=entry.citation_id)
                continue
            node.set_inner_html(note_markup(entry.index + 1, entry.text))

        # The processor sends no update when only note numbers change
        for number, node in enumerate(nodes, start=1):
            marks = self._host.get_elements_by_class(ClassName.FOOTNOTE_MARK, within=node)
            if marks:
                marks[0].set_inner_html(str(number))

        footnotes = self._host.get_element_by_id(ContainerId.FOOTNOTES)
        if footnotes is None:
            footnotes = self._host.create_element("div", footnotes_block, element_id=ContainerId.FOOTNOTES)
        footnotes.set_inner_html("")
        for number, node in enumerate(nodes, start=1):
            self._host.create_element(
                "p",
                footnotes,
                classes=(ClassName.FOOTNOTE,),
                inner_html=footnote_markup(number, self._note_text(node)),
            )

    @staticmethod
    def _note_text(node: DocumentNode) -> str:
        hidden = next((child for child in node.children() if child.hidden), None)
        return hidden.inner_html if hidden is not None else ""

    def _render_in_text(
        self,
        by_id: dict[str, DocumentNode],
        entries: Sequence[RenderEntry],
    ) -> None:
        ensure_footnotes_block(self._host).set_hidden(True)
        for entry in entries:
            node = by_id.get(entry.citation_id)
            if node is None:
                logger.warning("No slot carries citationID", citation_id=entry.citation_id)
                continue
            node.set_inner_html(entry.text)

    # =========================================================================
    # Bibliography
    # =========================================================================

    def set_bibliography(self, bibliography: Bibliography | None) -> LayoutPolicy:
        """Replace the bibliography with processor output.

        Args:
            bibliography: Layout hints and entry markup, None when the style has none

        Returns:
            The layout policy applied
        """
        block = ensure_bibliography_block(self._host)
        if bibliography is None or not bibliography.entries:
            block.set_hidden(True)
            return LayoutPolicy.NONE

        bib = self._host.get_element_by_id(ContainerId.BIBLIOGRAPHY)
        if bib is None:
            block.set_inner_html(BIBLIOGRAPHY_BLOCK_HTML)
            bib = self._host.get_element_by_id(ContainerId.BIBLIOGRAPHY)
        bib.set_style(LayoutStyle.HIDDEN)
        bib.set_inner_html("\n".join(bibliography.entries))

        layout = bibliography.layout
        if layout.hangingindent:
            self._apply_hanging_indent(bib)
            policy = LayoutPolicy.HANGING_INDENT
        elif layout.second_field_align:
            self._apply_second_field_align(bib, layout)
            policy = LayoutPolicy.SECOND_FIELD_ALIGN
        else:
            policy = LayoutPolicy.DEFAULT

        block.set_hidden(False)
        bib.set_style(LayoutStyle.VISIBLE)
        return policy

    def _apply_hanging_indent(self, bib: DocumentNode) -> None:
        for entry in self._host.get_elements_by_class(ClassName.CSL_ENTRY, within=bib):
            entry.set_style(LayoutStyle.HANGING_INDENT)

    def _apply_second_field_align(self, bib: DocumentNode, layout: BibliographyLayout) -> None:
        if layout.maxoffset:
            offset_spec = f"width: {css_number(layout.maxoffset / 2 + 0.5)}em;"
        else:
            offset_spec = LayoutStyle.LEFT_MARGIN_PADDING

        for entry in self._host.get_elements_by_class(ClassName.CSL_ENTRY, within=bib):
            entry.set_style(LayoutStyle.NOWRAP)
        for number in self._host.get_elements_by_class(ClassName.CSL_LEFT_MARGIN, within=bib):
            number.set_style(LayoutStyle.LEFT_MARGIN + offset_spec)

        if layout.maxoffset:
            # Host-reported widths are unreliable; use the configured width
            number_width = layout.maxoffset * MAX_OFFSET_UNIT_PX
            text_width = self.container_width - number_width - RIGHT_INLINE_GUTTER_PX
            width_spec = f"width:{css_number(text_width)}px;"
            for text in self._host.get_elements_by_class(ClassName.CSL_RIGHT_INLINE, within=bib):
                text.set_style(LayoutStyle.RIGHT_INLINE + width_spec)


__all__ = [
    "DocumentRenderer",
    "LayoutPolicy",
    "css_number",
    "footnote_markup",
    "note_markup",
]
