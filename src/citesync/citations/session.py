"""Citation session: one open document wired to its processor.

A session owns the host document, the storage, the shared citation state,
the reconciler, the renderer and the processor client, and receives the
processor's responses itself. Create one per open document and pass it
to whatever needs it (event handlers, editor commands).
"""

from __future__ import annotations

from citesync.citations.demo import demo_positions, restore_demo_slots
from citesync.citations.reconciler import DocumentReconciler, ReconciliationResult
from citesync.citations.renderer import DocumentRenderer
from citesync.citations.state import CitationState
from citesync.clients.processor import (
    ProcessorClient,
    RegistrationOutcome,
    RegistrationPolicy,
)
from citesync.clients.protocols import CitationProcessorProtocol
from citesync.core.config import Settings, get_settings
from citesync.core.logging import document_context, get_logger
from citesync.document.host import DocumentHost
from citesync.document.node_index import citation_nodes
from citesync.schemas.citations import Bibliography, Citation, Mode, RenderEntry
from citesync.schemas.processor import CitationRefPair
from citesync.storage.document import DocumentCitationStorage
from citesync.storage.protocols import CitationStorageProtocol


logger = get_logger(__name__)


class CitationSession:
    """Citation support for one open document.

    Attributes:
        state: Shared citation store, position index and mode
        reconciler: Rebuilds state from the document on load
        renderer: Applies processor output to the document
        client: Readiness-gated processor exchange

    Example:
        >>> session = CitationSession(HtmlDocument.from_html(markup), processor)
        >>> await session.init_document()
        >>> await session.register_citation(citation, slot_index=0)
        <RegistrationOutcome.SENT: 'sent'>
    """

    def __init__(
        self,
        host: DocumentHost,
        processor: CitationProcessorProtocol,
        storage: CitationStorageProtocol | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize a session.

        Args:
            host: The open document
            processor: Citation processor
            storage: Persisted citation data; defaults to records embedded in the document
            settings: Application settings; uses get_settings() if not provided
        """
        self._settings = settings or get_settings()
        self.host = host
        self.processor = processor
        self.storage = storage or DocumentCitationStorage(host, self._settings.document_id)
        self.state = CitationState(
            mode=Mode(self._settings.default_mode),
            style_id=self._settings.default_style,
            locale_id=self._settings.default_locale,
        )
        self.reconciler = DocumentReconciler(host, self.storage, self.state)
        self.renderer = DocumentRenderer(
            host,
            self.storage,
            self.state,
            container_width=self._settings.bibliography_container_width,
        )
        self.client = ProcessorClient(
            processor,
            handler=self,
            policy=RegistrationPolicy(self._settings.registration_policy),
        )

    def _trace(self, name: str) -> None:
        if self._settings.debug:
            logger.debug(name)

    def _context(self):
        return document_context(self.storage.document_id)

    # =========================================================================
    # Editor-facing operations
    # =========================================================================

    async def init_document(self) -> ReconciliationResult:
        """Reconcile the freshly loaded document and initialize the processor.

        Returns:
            The reconciliation result
        """
        with self._context():
            self._trace("init_document")
            if self._settings.demo:
                restore_demo_slots(self.host, self.storage.load_positions())
            result = self.reconciler.spoof()
            await self.client.initialize(self.state.style_id, self.state.locale_id, self.state.store)
        return result

    async def set_style(self, style_id: str) -> None:
        """Switch the document to another style and re-render everything."""
        with self._context():
            self._trace("set_style")
            self.state.style_id = style_id
            self.storage.save_style(style_id)
            await self.client.initialize(style_id, self.state.locale_id, self.state.store)

    def citation_refs(self, slot_index: int) -> tuple[list[CitationRefPair], list[CitationRefPair]]:
        """References to the citations before and after a slot.

        Args:
            slot_index: Ordinal of the slot being registered

        Returns:
            (preceding, following), each a list of (citationID, note number)
        """
        refs = [
            (index, (node.element_id, index + 1))
            for index, node in enumerate(citation_nodes(self.host))
            if node.element_id
        ]
        preceding = [ref for index, ref in refs if index < slot_index]
        following = [ref for index, ref in refs if index > slot_index]
        return preceding, following

    async def register_citation(
        self,
        citation: Citation,
        slot_index: int | None = None,
    ) -> RegistrationOutcome:
        """Register a new or edited citation with the processor.

        Args:
            citation: Citation produced by the editing UI
            slot_index: Ordinal of its slot; looked up by citationID when omitted

        Returns:
            What became of the request

        Raises:
            ValueError: If no slot index is given and no slot carries the citationID
        """
        with self._context():
            self._trace("register_citation")
            if slot_index is None:
                slot_index = self._slot_index_of(citation.citationID)
            preceding, following = self.citation_refs(slot_index)
            return await self.client.register_citation(citation, preceding, following)

    def _slot_index_of(self, citation_id: str | None) -> int:
        if citation_id:
            for index, node in enumerate(citation_nodes(self.host)):
                if node.element_id == citation_id:
                    return index
        raise ValueError(f"No citation slot for citationID {citation_id!r}; pass slot_index")

    async def close(self) -> None:
        """Release the processor client."""
        await self.processor.close()

    # =========================================================================
    # Processor responses
    # =========================================================================

    def on_initialized(
        self,
        mode: Mode,
        data: list[RenderEntry],
        bibliography: Bibliography | None,
    ) -> None:
        self._trace("on_initialized")
        self.state.mode = mode
        self.renderer.set_citations(mode, data)
        self.renderer.set_bibliography(bibliography)

    def on_registered(
        self,
        store: list[Citation],
        data: list[RenderEntry],
        bibliography: Bibliography | None,
    ) -> None:
        self._trace("on_registered")
        self.state.store = list(store)
        self.renderer.set_citations(self.state.mode, data)
        self.renderer.set_bibliography(bibliography)
        self.storage.save_store(self.state.store)
        if self._settings.demo:
            self.storage.save_positions(demo_positions(self.host))


__all__ = ["CitationSession"]
