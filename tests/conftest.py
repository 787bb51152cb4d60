"""Test configuration and shared fixtures.

Pattern: Pytest fixtures, conftest.py
Anti-Pattern Avoided: Fixture reuse without explicit scope
"""

from collections.abc import Callable

import pytest

from citesync.core.config import Settings
from citesync.document.html import HtmlDocument
from citesync.schemas.citations import Bibliography, Mode
from citesync.storage.memory import KeyValueCitationStorage
from tests.fakes.fake_processor import FakeCitationProcessor


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with safe defaults."""
    return Settings(
        environment="test",
        log_level="DEBUG",
        debug=True,
        document_id="test-doc",
        default_style="chicago-fullnote-bibliography",
        default_locale="en-US",
        default_mode="note",
        demo=False,
        registration_policy="drop",
        bibliography_container_width=680,
    )


# ============================================================================
# Document Fixtures
# ============================================================================

@pytest.fixture
def make_document() -> Callable[[str], HtmlDocument]:
    """Factory wrapping body markup in a full HTML document."""

    def _make(body: str = "") -> HtmlDocument:
        return HtmlDocument.from_html(f"<html><head></head><body>{body}</body></html>")

    return _make


@pytest.fixture
def three_slot_document(make_document: Callable[[str], HtmlDocument]) -> HtmlDocument:
    """Document with three identified citation slots in one paragraph."""
    return make_document(
        '<p id="para">One<span class="citation" id="a"></span> '
        'two<span class="citation" id="b"></span> '
        'three<span class="citation" id="c"></span>.</p>'
    )


# ============================================================================
# Bibliography Fixtures
# ============================================================================

@pytest.fixture
def sample_bibliography() -> Bibliography:
    """Bibliography in the processor's [layout, entries] wire shape."""
    return Bibliography.model_validate([
        {"hangingindent": True, "second-field-align": False, "maxoffset": None},
        [
            '<div class="csl-entry">Jones A. A book. 2001.</div>',
            '<div class="csl-entry">Smith B. An article. 1999.</div>',
        ],
    ])


# ============================================================================
# Storage and Processor Fixtures
# ============================================================================

@pytest.fixture
def kv_backend() -> dict[str, str]:
    """Plain dict backing key-value storage."""
    return {}


@pytest.fixture
def kv_storage(kv_backend: dict[str, str]) -> KeyValueCitationStorage:
    """Key-value storage for the test document."""
    return KeyValueCitationStorage("test-doc", kv_backend)


@pytest.fixture
def fake_processor() -> FakeCitationProcessor:
    """Fake citation processor in note mode with no bibliography."""
    return FakeCitationProcessor(mode=Mode.NOTE)
