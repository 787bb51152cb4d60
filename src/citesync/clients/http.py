"""HTTP client for a remote citation processor.

Async client with connection pooling (a single lazily created
httpx.AsyncClient). Transport and status failures are raised as
ProcessorError subclasses: a session cannot render without the
processor, so there is no fallback response.
"""

from __future__ import annotations

import asyncio
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel

from citesync.core.config import Settings
from citesync.core.constants import ProcessorEndpoint, Timeouts
from citesync.core.exceptions import (
    ProcessorRequestError,
    ProcessorResponseError,
    ProcessorTimeoutError,
)
from citesync.core.logging import get_logger
from citesync.schemas.processor import (
    InitializedResponse,
    InitializeRequest,
    RegisterCitationRequest,
    RegisteredResponse,
)


logger = get_logger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class HttpCitationProcessor:
    """HTTP client for a citation processor service.

    Implements CitationProcessorProtocol.

    Attributes:
        base_url: Base URL of the processor service
        timeout: Request timeout in seconds

    Example:
        >>> processor = HttpCitationProcessor(base_url="http://localhost:8090")
        >>> response = await processor.initialize(request)
        >>> await processor.close()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = Timeouts.PROCESSOR_DEFAULT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the processor client.

        Args:
            base_url: Base URL of the processor service
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> HttpCitationProcessor:
        """Create a client from application settings."""
        return cls(
            base_url=settings.processor_url,
            timeout=settings.processor_timeout_seconds,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client (lazy initialization)."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
            await asyncio.sleep(0)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpCitationProcessor:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def initialize(self, request: InitializeRequest) -> InitializedResponse:
        return await self._post(
            ProcessorEndpoint.INITIALIZE, request, InitializedResponse, "initialize"
        )

    async def register_citation(self, request: RegisterCitationRequest) -> RegisteredResponse:
        return await self._post(
            ProcessorEndpoint.REGISTER_CITATION, request, RegisteredResponse, "register_citation"
        )

    async def _post(
        self,
        endpoint: ProcessorEndpoint,
        request: BaseModel,
        response_model: type[ResponseT],
        operation: str,
    ) -> ResponseT:
        client = await self._get_client()
        payload = request.model_dump(mode="json", exclude_none=True)

        try:
            response = await client.post(endpoint.value, json=payload)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise ProcessorTimeoutError(
                f"Citation processor timed out during {operation}",
                operation=operation,
                timeout_seconds=self.timeout,
                cause=e,
            ) from e
        except httpx.HTTPStatusError as e:
            raise ProcessorRequestError(
                f"Citation processor returned {e.response.status_code} for {operation}",
                operation=operation,
                status_code=e.response.status_code,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise ProcessorRequestError(
                f"Citation processor request failed during {operation}: {e}",
                operation=operation,
                cause=e,
            ) from e

        try:
            return response_model.model_validate(response.json())
        except ValueError as e:
            logger.warning("Malformed citation processor response", operation=operation, error=str(e))
            raise ProcessorResponseError(
                f"Malformed citation processor response for {operation}",
                operation=operation,
                cause=e,
            ) from e


__all__ = ["HttpCitationProcessor"]
