"""Citation processor protocol.

The processor is the only source of citation text, note numbering and
bibliography markup. Anything that answers these two requests can stand
behind a session: a remote service, a worker process, an in-process
engine or a test double.

Pattern: Protocol duck typing
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from citesync.schemas.processor import (
    InitializedResponse,
    InitializeRequest,
    RegisterCitationRequest,
    RegisteredResponse,
)


@runtime_checkable
class CitationProcessorProtocol(Protocol):
    """Protocol for citation processor clients.

    Methods:
        initialize: Load style and locale, re-render the given citations
        register_citation: Insert or update one citation between its neighbours
        close: Release client resources
    """

    async def initialize(self, request: InitializeRequest) -> InitializedResponse:
        """Load a style and locale seeded with the document's citations.

        Args:
            request: Style, locale and citation store

        Returns:
            Mode, rebuilt citation texts and bibliography
        """
        ...

    async def register_citation(self, request: RegisterCitationRequest) -> RegisteredResponse:
        """Register a new or edited citation.

        Args:
            request: Citation plus preceding and following references

        Returns:
            Updated store, changed citation texts and bibliography
        """
        ...

    async def close(self) -> None:
        """Release client resources."""
        ...


__all__ = ["CitationProcessorProtocol"]
