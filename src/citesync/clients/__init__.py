"""Citation processor clients.

- CitationProcessorProtocol: interface every processor implements
- HttpCitationProcessor: remote processor over HTTP
- ProcessorClient: readiness-gated request/response exchange
"""

from citesync.clients.http import HttpCitationProcessor
from citesync.clients.processor import (
    ProcessorClient,
    RegistrationOutcome,
    RegistrationPolicy,
    ResponseHandler,
    convert_citation_data,
    convert_rebuild_list,
)
from citesync.clients.protocols import CitationProcessorProtocol

__all__ = [
    "CitationProcessorProtocol",
    "HttpCitationProcessor",
    "ProcessorClient",
    "RegistrationOutcome",
    "RegistrationPolicy",
    "ResponseHandler",
    "convert_citation_data",
    "convert_rebuild_list",
]
