"""Custom exceptions for citesync.

All exceptions are namespaced to avoid shadowing Python builtins.
Consistency problems found in persisted citation data are not errors:
the reconciler repairs them and logs a warning. These exceptions cover
the processor transport and the storage codec.
"""

from __future__ import annotations


class CiteSyncError(Exception):
    """Base exception for all citesync errors.

    Attributes:
        message: Human-readable error description.
        cause: Original exception that caused this error (optional).
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """Initialize citesync error.

        Args:
            message: Human-readable error description.
            cause: Original exception that caused this error.
        """
        self.message = message
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class ProcessorError(CiteSyncError):
    """Raised when the citation processor cannot serve a request.

    Attributes:
        operation: Processor operation that failed (initialize, register_citation).
    """

    def __init__(
        self,
        message: str,
        operation: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause)
        self.operation = operation


class ProcessorRequestError(ProcessorError):
    """Raised when a processor request fails in transport or returns an error status."""

    def __init__(
        self,
        message: str,
        operation: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, operation, cause)
        self.status_code = status_code


class ProcessorTimeoutError(ProcessorError):
    """Raised when a processor request exceeds its timeout.

    NOT named TimeoutError to avoid shadowing builtins.TimeoutError.
    """

    def __init__(
        self,
        message: str,
        operation: str,
        timeout_seconds: float | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, operation, cause)
        self.timeout_seconds = timeout_seconds


class ProcessorResponseError(ProcessorError):
    """Raised when a processor response body does not match the expected shape."""


class StorageError(CiteSyncError):
    """Base exception for citation storage failures."""


class RecordDecodeError(StorageError):
    """Raised when a persisted citation blob cannot be decoded.

    Attributes:
        record_key: Key of the offending record, when known.
    """

    def __init__(
        self,
        message: str,
        record_key: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause)
        self.record_key = record_key


class InvalidStorageKeyError(StorageError):
    """Raised when a storage key cannot be built or parsed."""
