"""Tests for CitationSession.

Drives a session over an HTML document with the fake processor, from
an empty document through registration to reopening the saved markup.
"""

from collections.abc import Callable

import pytest

from citesync.citations.reconciler import RepairKind
from citesync.citations.session import CitationSession
from citesync.clients.processor import RegistrationOutcome, RegistrationPolicy
from citesync.core.config import Settings
from citesync.core.constants import ContainerId
from citesync.core.exceptions import ProcessorRequestError
from citesync.document.html import HtmlDocument, HtmlNode
from citesync.document.node_index import citation_nodes
from citesync.schemas.citations import Citation, Mode
from citesync.storage.codec import decode_citation
from citesync.storage.memory import KeyValueCitationStorage
from tests.fakes.fake_processor import FakeCitationProcessor


def new_citation(*item_ids: str) -> Citation:
    return Citation(citationItems=[{"id": item_id} for item_id in item_ids])


def add_slot(doc: HtmlDocument, before: HtmlNode | None = None) -> HtmlNode:
    return doc.create_element("span", doc.get_element_by_id("para"), classes=("citation",), before=before)


def marks(doc: HtmlDocument) -> list[str]:
    return [
        doc.get_elements_by_class("footnote-mark", within=node)[0].text
        for node in citation_nodes(doc)
    ]


def footnote_texts(doc: HtmlDocument) -> list[str]:
    footnotes = doc.get_element_by_id(ContainerId.FOOTNOTES)
    return [node.text for node in doc.get_elements_by_class("footnote-text", within=footnotes)]


@pytest.fixture
def paragraph_document(make_document: Callable[[str], HtmlDocument]) -> HtmlDocument:
    return make_document('<p id="para">Some text.</p>')


@pytest.fixture
def session(
    paragraph_document: HtmlDocument,
    fake_processor: FakeCitationProcessor,
    test_settings: Settings,
) -> CitationSession:
    return CitationSession(paragraph_document, fake_processor, settings=test_settings)


# =============================================================================
# Initialization
# =============================================================================

class TestInitDocument:
    """Tests for init_document."""

    @pytest.mark.asyncio
    async def test_empty_document(
        self,
        session: CitationSession,
        paragraph_document: HtmlDocument,
        fake_processor: FakeCitationProcessor,
    ) -> None:
        """Test an empty document initializes with an empty store."""
        result = await session.init_document()

        assert result.repairs == []
        [call] = fake_processor.call_history
        assert call["method"] == "initialize"
        assert call["request"].styleID == "chicago-fullnote-bibliography"
        assert call["request"].citationStore == []
        assert session.client.ready
        assert session.state.mode is Mode.NOTE
        assert paragraph_document.get_element_by_id(ContainerId.FOOTNOTES_BLOCK).hidden
        assert paragraph_document.get_element_by_id(ContainerId.BIBLIOGRAPHY_BLOCK).hidden

    @pytest.mark.asyncio
    async def test_mode_from_processor(
        self,
        paragraph_document: HtmlDocument,
        test_settings: Settings,
    ) -> None:
        """Test the processor's mode replaces the configured default."""
        session = CitationSession(
            paragraph_document, FakeCitationProcessor(mode=Mode.IN_TEXT), settings=test_settings
        )

        await session.init_document()

        assert session.state.mode is Mode.IN_TEXT

    @pytest.mark.asyncio
    async def test_initialize_failure_leaves_not_ready(
        self,
        paragraph_document: HtmlDocument,
        test_settings: Settings,
    ) -> None:
        """Test a failed initialize propagates and blocks registration."""
        processor = FakeCitationProcessor(
            error_on={"initialize": ProcessorRequestError("down", operation="initialize")}
        )
        session = CitationSession(paragraph_document, processor, settings=test_settings)

        with pytest.raises(ProcessorRequestError):
            await session.init_document()

        assert not session.client.ready
        outcome = await session.register_citation(new_citation("ITEM-1"), slot_index=0)
        assert outcome is RegistrationOutcome.DROPPED

    def test_policy_from_settings(
        self,
        paragraph_document: HtmlDocument,
        fake_processor: FakeCitationProcessor,
        test_settings: Settings,
    ) -> None:
        """Test the registration policy comes from settings."""
        settings = test_settings.model_copy(update={"registration_policy": "latest_wins"})

        session = CitationSession(paragraph_document, fake_processor, settings=settings)

        assert session.client.policy is RegistrationPolicy.LATEST_WINS


# =============================================================================
# Registration
# =============================================================================

class TestRegisterCitation:
    """Tests for registering citations through a session."""

    @pytest.mark.asyncio
    async def test_register_before_init_dropped(
        self,
        session: CitationSession,
        paragraph_document: HtmlDocument,
        fake_processor: FakeCitationProcessor,
    ) -> None:
        """Test nothing is sent before the processor is initialized."""
        add_slot(paragraph_document)

        outcome = await session.register_citation(new_citation("ITEM-1"), slot_index=0)

        assert outcome is RegistrationOutcome.DROPPED
        assert fake_processor.call_history == []

    @pytest.mark.asyncio
    async def test_register_new_citation(
        self,
        session: CitationSession,
        paragraph_document: HtmlDocument,
    ) -> None:
        """Test a new citation is identified, rendered and persisted."""
        await session.init_document()
        add_slot(paragraph_document)

        outcome = await session.register_citation(new_citation("ITEM-1"), slot_index=0)

        assert outcome is RegistrationOutcome.SENT
        [slot] = citation_nodes(paragraph_document)
        assert slot.element_id == "CITATION-1"
        assert marks(paragraph_document) == ["1"]
        assert footnote_texts(paragraph_document) == ["ITEM-1"]
        assert not paragraph_document.get_element_by_id(ContainerId.FOOTNOTES_BLOCK).hidden
        assert session.storage.record_ids() == ["CITATION-1"]
        assert [c.citationID for c in session.storage.load_store()] == ["CITATION-1"]

    @pytest.mark.asyncio
    async def test_insert_before_renumbers(
        self,
        session: CitationSession,
        paragraph_document: HtmlDocument,
        fake_processor: FakeCitationProcessor,
    ) -> None:
        """Test a citation inserted ahead of another takes note 1."""
        await session.init_document()
        first = add_slot(paragraph_document)
        await session.register_citation(new_citation("ITEM-1"), slot_index=0)
        add_slot(paragraph_document, before=first)

        await session.register_citation(new_citation("ITEM-2"), slot_index=0)

        request = fake_processor.registrations()[-1]
        assert request.precedingRefs == []
        assert request.followingRefs == [("CITATION-1", 2)]
        assert [n.element_id for n in citation_nodes(paragraph_document)] == ["CITATION-2", "CITATION-1"]
        assert marks(paragraph_document) == ["1", "2"]
        assert footnote_texts(paragraph_document) == ["ITEM-2", "ITEM-1"]
        assert session.state.position_index == {"CITATION-2": 0, "CITATION-1": 1}

    @pytest.mark.asyncio
    async def test_edit_located_by_citation_id(
        self,
        session: CitationSession,
        paragraph_document: HtmlDocument,
    ) -> None:
        """Test an edited citation finds its own slot."""
        await session.init_document()
        add_slot(paragraph_document)
        add_slot(paragraph_document)
        await session.register_citation(new_citation("ITEM-1"), slot_index=0)
        await session.register_citation(new_citation("ITEM-2"), slot_index=1)

        edited = Citation(citationID="CITATION-2", citationItems=[{"id": "ITEM-3"}])
        outcome = await session.register_citation(edited)

        assert outcome is RegistrationOutcome.SENT
        assert footnote_texts(paragraph_document) == ["ITEM-1", "ITEM-3"]

    @pytest.mark.asyncio
    async def test_unknown_citation_id_rejected(self, session: CitationSession) -> None:
        """Test an edit for a citation with no slot raises."""
        await session.init_document()

        with pytest.raises(ValueError, match="No citation slot"):
            await session.register_citation(Citation(citationID="missing"))

    @pytest.mark.asyncio
    async def test_in_text_mode(
        self,
        paragraph_document: HtmlDocument,
        test_settings: Settings,
    ) -> None:
        """Test in-text styles put the text in the slot."""
        session = CitationSession(
            paragraph_document, FakeCitationProcessor(mode=Mode.IN_TEXT), settings=test_settings
        )
        await session.init_document()
        add_slot(paragraph_document)

        await session.register_citation(new_citation("ITEM-1", "ITEM-2"), slot_index=0)

        assert citation_nodes(paragraph_document)[0].inner_html == "ITEM-1, ITEM-2"
        assert paragraph_document.get_element_by_id(ContainerId.FOOTNOTES_BLOCK).hidden

    def test_citation_refs(self, session: CitationSession, make_document: Callable[[str], HtmlDocument]) -> None:
        """Test neighbours are (citationID, ordinal) around the slot."""
        session.host = make_document(
            '<span class="citation" id="a"></span><span class="citation"></span>'
            '<span class="citation" id="c"></span>'
        )

        preceding, following = session.citation_refs(1)

        assert preceding == [("a", 1)]
        assert following == [("c", 3)]


# =============================================================================
# Style, reopen, demo
# =============================================================================

class TestSessionLifecycle:
    """Tests for style changes, reopening and demo documents."""

    @pytest.mark.asyncio
    async def test_set_style(
        self,
        session: CitationSession,
        paragraph_document: HtmlDocument,
        fake_processor: FakeCitationProcessor,
    ) -> None:
        """Test a style change is stored and re-initializes the processor."""
        await session.init_document()

        await session.set_style("apa")

        assert fake_processor.call_history[-1]["request"].styleID == "apa"
        assert session.storage.load_style() == "apa"
        assert session.state.style_id == "apa"

    @pytest.mark.asyncio
    async def test_reopen_saved_document(
        self,
        session: CitationSession,
        paragraph_document: HtmlDocument,
        test_settings: Settings,
    ) -> None:
        """Test saved markup reopens with the same citations and no repairs."""
        await session.init_document()
        first = add_slot(paragraph_document)
        await session.register_citation(new_citation("ITEM-1"), slot_index=0)
        add_slot(paragraph_document, before=first)
        await session.register_citation(new_citation("ITEM-2"), slot_index=0)
        await session.set_style("apa")

        reopened = HtmlDocument.from_html(paragraph_document.to_html())
        processor = FakeCitationProcessor()
        second = CitationSession(reopened, processor, settings=test_settings)
        result = await second.init_document()

        assert result.repairs == []
        request = processor.call_history[0]["request"]
        assert request.styleID == "apa"
        assert [c.citationID for c in request.citationStore] == ["CITATION-2", "CITATION-1"]
        assert marks(reopened) == ["1", "2"]
        assert footnote_texts(reopened) == ["ITEM-2", "ITEM-1"]

    @pytest.mark.asyncio
    async def test_style_change_after_slot_moved(
        self,
        session: CitationSession,
        paragraph_document: HtmlDocument,
        test_settings: Settings,
    ) -> None:
        """Test moving a slot then changing style keeps every record under its own ID."""
        await session.init_document()
        for index, item_id in enumerate(("ITEM-1", "ITEM-2", "ITEM-3")):
            add_slot(paragraph_document)
            await session.register_citation(new_citation(item_id), slot_index=index)
        last = citation_nodes(paragraph_document)[-1].tag.extract()
        paragraph_document.get_element_by_id("para").tag.insert(0, last)

        await session.set_style("apa")

        records = {rid: decode_citation(blob) for rid, blob in session.storage.load_records()}
        assert {rid: c.citationID for rid, c in records.items()} == {
            "CITATION-1": "CITATION-1",
            "CITATION-2": "CITATION-2",
            "CITATION-3": "CITATION-3",
        }
        assert records["CITATION-3"].citationItems == [{"id": "ITEM-3"}]
        assert [c.citationID for c in session.state.store] == ["CITATION-3", "CITATION-1", "CITATION-2"]
        assert footnote_texts(paragraph_document) == ["ITEM-3", "ITEM-1", "ITEM-2"]

        reopened = HtmlDocument.from_html(paragraph_document.to_html())
        second = CitationSession(reopened, FakeCitationProcessor(), settings=test_settings)
        result = await second.init_document()

        assert result.repairs == []
        assert footnote_texts(reopened) == ["ITEM-3", "ITEM-1", "ITEM-2"]

    @pytest.mark.asyncio
    async def test_reopen_with_missing_record_resets(
        self,
        session: CitationSession,
        paragraph_document: HtmlDocument,
        test_settings: Settings,
    ) -> None:
        """Test a document whose data block lost a record drops its citations."""
        await session.init_document()
        add_slot(paragraph_document)
        add_slot(paragraph_document)
        await session.register_citation(new_citation("ITEM-1"), slot_index=0)
        await session.register_citation(new_citation("ITEM-2"), slot_index=1)
        session.storage.delete_record("CITATION-1")

        reopened = HtmlDocument.from_html(paragraph_document.to_html())
        second = CitationSession(reopened, FakeCitationProcessor(), settings=test_settings)
        result = await second.init_document()

        assert result.reset
        assert result.repairs[-1].kind is RepairKind.FULL_RESET
        assert citation_nodes(reopened) == []
        assert second.storage.record_ids() == []

    @pytest.mark.asyncio
    async def test_demo_positions_restored(
        self,
        make_document: Callable[[str], HtmlDocument],
        kv_backend: dict[str, str],
        test_settings: Settings,
    ) -> None:
        """Test a demo document gets its slots back from stored peg positions."""
        pegs = (
            '<p>One<span class="citeme"></span></p>'
            '<p>Two<span class="citeme"></span></p>'
        )
        settings = test_settings.model_copy(update={"demo": True})
        doc = make_document(pegs)
        session = CitationSession(
            doc, FakeCitationProcessor(), KeyValueCitationStorage("test-doc", kv_backend), settings
        )
        await session.init_document()
        peg = doc.get_elements_by_class("citeme")[1]
        doc.create_element("span", peg, classes=("citation",))
        await session.register_citation(new_citation("ITEM-1"), slot_index=0)

        fresh = make_document(pegs)
        second = CitationSession(
            fresh, FakeCitationProcessor(), KeyValueCitationStorage("test-doc", kv_backend), settings
        )
        result = await second.init_document()

        assert not result.reset
        slot = citation_nodes(fresh)[0]
        assert slot.element_id == "CITATION-1"
        assert slot.parent_has_class("citeme")
        assert fresh.get_elements_by_class("citeme")[1].inner_html.count("CITATION-1") == 1
        assert [c.citationID for c in second.state.store] == ["CITATION-1"]

    @pytest.mark.asyncio
    async def test_close(self, session: CitationSession, fake_processor: FakeCitationProcessor) -> None:
        """Test closing the session closes the processor."""
        await session.close()

        assert fake_processor.closed
