"""Processor protocol client.

Sends initialize and register requests to the citation processor and
hands each response to a ResponseHandler (the session, which renders it).

Readiness: a register request is only sent when the processor is ready,
i.e. initialized, with no initialize outstanding and no other register
request in flight. Initialize is never gated; it is what establishes
readiness. A register request finishing while an initialize is
outstanding leaves the client not ready, and a pending request is
discarded rather than sent against the old style. What happens
to a register request made while another is in flight is set by the
RegistrationPolicy:

- DROP: the request is discarded and never sent.
- LATEST_WINS: the request waits in a single pending slot; a newer one
  replaces it. The pending request is sent as soon as the in-flight
  response has been applied.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Protocol

from citesync.clients.protocols import CitationProcessorProtocol
from citesync.core.logging import get_logger
from citesync.schemas.citations import Bibliography, Citation, Mode, RenderEntry
from citesync.schemas.processor import (
    CitationDataEntry,
    CitationRefPair,
    InitializedResponse,
    InitializeRequest,
    RebuildEntry,
    RegisterCitationRequest,
)


logger = get_logger(__name__)


class RegistrationPolicy(str, Enum):
    """Handling of a register request made while another is in flight."""

    DROP = "drop"
    LATEST_WINS = "latest_wins"


class RegistrationOutcome(str, Enum):
    """What became of a register request."""

    SENT = "sent"
    DROPPED = "dropped"
    QUEUED = "queued"


class ResponseHandler(Protocol):
    """Receiver of processor responses."""

    def on_initialized(
        self,
        mode: Mode,
        data: list[RenderEntry],
        bibliography: Bibliography | None,
    ) -> None:
        ...

    def on_registered(
        self,
        store: list[Citation],
        data: list[RenderEntry],
        bibliography: Bibliography | None,
    ) -> None:
        ...


def convert_rebuild_list(rebuild_list: Sequence[RebuildEntry]) -> list[RenderEntry]:
    """Convert initialize output to render entries.

    Rebuild entries are ``(citationID, ordinal, text)``. The processor's
    ordinal is discarded: the entry's position in the list is its index.

    Example:
        >>> convert_rebuild_list([("c1", 1, "Smith"), ("c2", 2, "Jones")])
        [RenderEntry(index=0, text='Smith', citation_id='c1'), RenderEntry(index=1, text='Jones', citation_id='c2')]
    """
    return [
        RenderEntry(index, text, citation_id)
        for index, (citation_id, _ordinal, text) in enumerate(rebuild_list)
    ]


def convert_citation_data(
    citation_data: Sequence[CitationDataEntry],
    store: Sequence[Citation],
) -> list[RenderEntry]:
    """Convert register output to render entries.

    Entries without a citationID take it from the store entry at the same
    index; entries that cannot be resolved are skipped with a warning.
    """
    entries = []
    for item in citation_data:
        index, text = item[0], item[1]
        citation_id = item[2] if len(item) > 2 else None
        if citation_id is None and 0 <= index < len(store):
            citation_id = store[index].citationID
        if not citation_id:
            logger.warning("Skipping citation data with no citationID", index=index)
            continue
        entries.append(RenderEntry(index, text, citation_id))
    return entries


class ProcessorClient:
    """Request/response exchange with the citation processor.

    Attributes:
        policy: Handling of overlapping register requests

    Example:
        >>> client = ProcessorClient(processor, handler=session)
        >>> await client.initialize("apa", "en-US", [])
        >>> client.ready
        True
    """

    def __init__(
        self,
        processor: CitationProcessorProtocol,
        handler: ResponseHandler,
        policy: RegistrationPolicy = RegistrationPolicy.DROP,
    ) -> None:
        self._processor = processor
        self._handler = handler
        self.policy = policy
        self._ready = False
        self._initialized = False
        self._initializing = 0
        self._in_flight = False
        self._pending: RegisterCitationRequest | None = None

    @property
    def ready(self) -> bool:
        """True when a register request would be sent now."""
        return self._ready

    @property
    def pending(self) -> RegisterCitationRequest | None:
        """Register request waiting behind the in-flight one (LATEST_WINS only)."""
        return self._pending

    async def initialize(
        self,
        style_id: str,
        locale_id: str,
        store: Sequence[Citation] | None = None,
    ) -> InitializedResponse:
        """Initialize the processor and render its output.

        Readiness is only set once the response has been applied; after a
        failure the processor stays not ready.

        Args:
            style_id: Style to load
            locale_id: Locale to load
            store: Citations in document order

        Returns:
            The processor response

        Raises:
            ProcessorError: If the processor cannot serve the request
        """
        logger.debug("Initializing citation processor", style_id=style_id, locale_id=locale_id)
        self._ready = False
        self._initialized = False
        self._initializing += 1
        request = InitializeRequest(
            styleID=style_id,
            localeID=locale_id,
            citationStore=list(store or []),
        )
        try:
            response = await self._processor.initialize(request)
            self._handler.on_initialized(
                response.mode,
                convert_rebuild_list(response.rebuildList),
                response.bibliography,
            )
        finally:
            self._initializing -= 1
        self._initialized = True
        self._ready = self._initializing == 0 and not self._in_flight
        return response

    async def register_citation(
        self,
        citation: Citation,
        preceding: Sequence[CitationRefPair] = (),
        following: Sequence[CitationRefPair] = (),
    ) -> RegistrationOutcome:
        """Register a citation between its neighbours.

        Args:
            citation: New or edited citation
            preceding: (citationID, ordinal) of citations before it, in document order
            following: (citationID, ordinal) of citations after it, in document order

        Returns:
            SENT, or DROPPED / QUEUED when the processor was not ready

        Raises:
            ProcessorError: If the processor cannot serve the request
        """
        request = RegisterCitationRequest(
            citation=citation,
            precedingRefs=list(preceding),
            followingRefs=list(following),
        )
        if not self._ready:
            if self.policy is RegistrationPolicy.LATEST_WINS and self._in_flight:
                if self._pending is not None:
                    logger.debug(
                        "Superseding pending register request",
                        citation_id=self._pending.citation.citationID,
                    )
                self._pending = request
                return RegistrationOutcome.QUEUED
            logger.debug(
                "Dropping register request, processor not ready",
                citation_id=citation.citationID,
            )
            return RegistrationOutcome.DROPPED

        await self._send(request)
        return RegistrationOutcome.SENT

    async def _send(self, request: RegisterCitationRequest) -> None:
        self._ready = False
        self._in_flight = True
        next_request: RegisterCitationRequest | None = request
        try:
            while next_request is not None:
                logger.debug("Registering citation", citation_id=next_request.citation.citationID)
                response = await self._processor.register_citation(next_request)
                self._handler.on_registered(
                    list(response.citationStore),
                    convert_citation_data(response.citationData, response.citationStore),
                    response.bibliography,
                )
                if self._initializing:
                    break
                next_request, self._pending = self._pending, None
        finally:
            if self._pending is not None:
                logger.warning(
                    "Discarding pending register request",
                    citation_id=self._pending.citation.citationID,
                )
                self._pending = None
            self._in_flight = False
            self._ready = self._initialized and self._initializing == 0


__all__ = [
    "ProcessorClient",
    "RegistrationOutcome",
    "RegistrationPolicy",
    "ResponseHandler",
    "convert_citation_data",
    "convert_rebuild_list",
]
