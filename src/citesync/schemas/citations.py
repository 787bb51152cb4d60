"""Citation, slot and bibliography schemas.

Models:
- Mode: note vs in-text rendering discipline
- Citation: opaque citation record, identified once registered
- SlotRef: a citation slot in document order
- RenderEntry: one citation to render, as (index, text, citationID)
- BibliographyLayout / Bibliography: processor bibliography output

Wire field names follow the processor protocol (camelCase), as the
processor reads and writes them verbatim.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# Enums
# =============================================================================

class Mode(str, Enum):
    """Rendering discipline of the current style, global to a document."""

    NOTE = "note"
    IN_TEXT = "in-text"


# =============================================================================
# Citation
# =============================================================================

class Citation(BaseModel):
    """One citation: its source references plus formatting directives.

    The record is opaque to the engine apart from ``citationID``; fields
    the processor adds are preserved through ``extra="allow"`` so that a
    record survives a persist/restore cycle unchanged.

    Attributes:
        citationID: Processor-assigned identity, None until first registered
        citationItems: Cited sources (item IDs, locators, prefixes)
        properties: Formatting directives such as noteIndex

    Example:
        >>> citation = Citation(
        ...     citationItems=[{"id": "ITEM-1", "locator": "12"}],
        ...     properties={"noteIndex": 1},
        ... )
        >>> citation.citationID is None
        True
    """

    model_config = ConfigDict(extra="allow")

    citationID: str | None = Field(
        default=None,
        description="Processor-assigned citation identity",
    )
    citationItems: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Sources referenced by this citation",
    )
    properties: dict[str, Any] = Field(
        default_factory=dict,
        description="Formatting directives, e.g. noteIndex",
    )


class SlotRef(NamedTuple):
    """A citation slot in document order.

    ``index`` is the slot's ordinal among all slots at the time the list
    was taken; it is not stable across edits.
    """

    index: int
    citation_id: str | None


class RenderEntry(NamedTuple):
    """A citation to render: slot index, formatted text, citationID."""

    index: int
    text: str
    citation_id: str


# =============================================================================
# Bibliography
# =============================================================================

class BibliographyLayout(BaseModel):
    """Layout hints the processor sends with a bibliography.

    Values are truthiness-tested: the processor sends numbers or strings
    for some of them (e.g. ``"second-field-align": "flush"``).
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    hangingindent: bool | float = Field(default=False, description="Hanging indent requested")
    second_field_align: bool | str = Field(
        default=False,
        alias="second-field-align",
        description="Align the second field of each entry in a column",
    )
    maxoffset: float | None = Field(
        default=None,
        description="Widest first field, in characters",
    )


class Bibliography(BaseModel):
    """Formatted bibliography: layout hints plus serialized entry markup.

    The processor sends this as a two-element list ``[layout, entries]``;
    both that shape and a mapping are accepted.
    """

    layout: BibliographyLayout = Field(default_factory=BibliographyLayout)
    entries: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _accept_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            layout = data[0] if len(data) > 0 and data[0] else {}
            entries = data[1] if len(data) > 1 and data[1] else []
            return {"layout": layout, "entries": entries}
        return data

    def to_wire(self) -> list[Any]:
        """Serialize back to the processor's ``[layout, entries]`` shape."""
        return [self.layout.model_dump(by_alias=True), list(self.entries)]
