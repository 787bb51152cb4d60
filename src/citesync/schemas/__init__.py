"""Citation and processor protocol schemas."""

from citesync.schemas.citations import (
    Bibliography,
    BibliographyLayout,
    Citation,
    Mode,
    RenderEntry,
    SlotRef,
)
from citesync.schemas.processor import (
    InitializedResponse,
    InitializeRequest,
    RegisterCitationRequest,
    RegisteredResponse,
)

__all__ = [
    "Bibliography",
    "BibliographyLayout",
    "Citation",
    "InitializeRequest",
    "InitializedResponse",
    "Mode",
    "RegisterCitationRequest",
    "RegisteredResponse",
    "RenderEntry",
    "SlotRef",
]
