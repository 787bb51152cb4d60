"""Document structure constants and rendering style fragments.

Element IDs and class names form the contract with the host document:
slots carry the ``citation`` class, persisted records the
``citation-data`` class, and bibliography markup from the processor uses
the ``csl-*`` classes.
"""

from enum import Enum


# =============================================================================
# Element IDs
# =============================================================================

class ContainerId:
    """IDs of the containers the renderer creates on first use."""
    FOOTNOTES_BLOCK = "footnote-container"
    FOOTNOTES = "footnotes"
    BIBLIOGRAPHY_BLOCK = "bibliography-container"
    BIBLIOGRAPHY = "bibliography"
    DATA = "citesupport-data-container"
    STYLE = "citesupport-style-container"


# Persisted records are stored under "csdata-<citationID>"
DATA_RECORD_ID_PREFIX = "csdata-"

# Generated IDs for slots that reach reconciliation without one
GENERATED_ID_PREFIX = "cite-"


# =============================================================================
# Class Names
# =============================================================================

class ClassName:
    """Class names in the host document contract."""
    CITATION = "citation"
    CITATION_DATA = "citation-data"
    DEMO_PEG = "citeme"
    NON_EDITABLE = "mceNonEditable"
    OFFSCREEN = "mce-offscreen-selection"
    FOOTNOTE = "footnote"
    FOOTNOTE_MARK = "footnote-mark"
    FOOTNOTE_NUMBER = "footnote-number"
    FOOTNOTE_TEXT = "footnote-text"
    CSL_ENTRY = "csl-entry"
    CSL_LEFT_MARGIN = "csl-left-margin"
    CSL_RIGHT_INLINE = "csl-right-inline"


# =============================================================================
# Container Markup
# =============================================================================

FOOTNOTES_BLOCK_HTML = (
    '<div class="footnote-header"><b>Footnotes</b></div>'
    f'<div id="{ContainerId.FOOTNOTES}"></div>'
)
BIBLIOGRAPHY_BLOCK_HTML = f'<h2>Bibliography</h2><div id="{ContainerId.BIBLIOGRAPHY}"></div>'


# =============================================================================
# Bibliography Layout Styles
# =============================================================================

class LayoutStyle:
    """Inline style fragments applied to processor bibliography markup."""
    HANGING_INDENT = "padding-left: 1.3em;text-indent: -1.3em;"
    NOWRAP = "white-space: nowrap;"
    LEFT_MARGIN = "display:inline-block;vertical-align:top;"
    LEFT_MARGIN_PADDING = "padding-right:0.3em;"
    RIGHT_INLINE = "display: inline-block;white-space: normal;"
    HIDDEN = "visibility: hidden;"
    VISIBLE = "visibility: visible;"


# Assumed px width of one unit of the processor's maxoffset hint
MAX_OFFSET_UNIT_PX: float = 90 / 9
# Space kept between the number column and the entry text, in px
RIGHT_INLINE_GUTTER_PX = 20
DEFAULT_CONTAINER_WIDTH_PX = 680


# =============================================================================
# Processor Endpoints
# =============================================================================

class ProcessorEndpoint(str, Enum):
    """HTTP endpoints of a remote citation processor."""
    INITIALIZE = "/v1/processor/initialize"
    REGISTER_CITATION = "/v1/processor/register-citation"


class Timeouts:
    """Default timeout values in seconds."""
    PROCESSOR_DEFAULT: float = 30.0
