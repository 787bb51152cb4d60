"""Processor protocol request/response schemas.

| Request          | Response    |
|------------------|-------------|
| initialize       | initialized |
| registerCitation | registered  |

Reference pairs are ``(citationID, ordinal)``; rebuild entries are
``(citationID, ordinal, text)``; citation data entries are
``(index, text)`` or ``(index, text, citationID)``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from citesync.schemas.citations import Bibliography, Citation, Mode


CitationRefPair = tuple[str, int]
RebuildEntry = tuple[str, int, str]
CitationDataEntry = tuple[int, str] | tuple[int, str, str]


class InitializeRequest(BaseModel):
    """Load a style and locale, seeded with the document's citations."""

    styleID: str = Field(..., description="Style identifier")
    localeID: str = Field(..., description="Locale identifier")
    citationStore: list[Citation] = Field(
        default_factory=list,
        description="Citations in document order",
    )


class InitializedResponse(BaseModel):
    """Processor state after initialize."""

    mode: Mode = Field(..., description="Mode of the loaded style")
    rebuildList: list[RebuildEntry] = Field(
        default_factory=list,
        description="Every citation re-rendered, in document order",
    )
    bibliography: Bibliography | None = Field(default=None)


class RegisterCitationRequest(BaseModel):
    """Register a new or edited citation between its neighbours."""

    citation: Citation = Field(..., description="Citation to register")
    precedingRefs: list[CitationRefPair] = Field(
        default_factory=list,
        description="Citations before this one, in document order",
    )
    followingRefs: list[CitationRefPair] = Field(
        default_factory=list,
        description="Citations after this one, in document order",
    )


class RegisteredResponse(BaseModel):
    """Processor state after registering a citation."""

    citationStore: list[Citation] = Field(
        default_factory=list,
        description="Complete citation store, replaces the in-memory store",
    )
    citationData: list[CitationDataEntry] = Field(
        default_factory=list,
        description="Citations whose rendering changed",
    )
    bibliography: Bibliography | None = Field(default=None)
