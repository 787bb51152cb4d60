"""Core module - Configuration, logging, exceptions and document constants.

Exports:
    - Settings, get_settings: Pydantic Settings configuration
    - configure_logging, get_logger: Structured logging (structlog)
    - Exception classes: CiteSyncError, ProcessorError, StorageError, etc.
"""

from citesync.core.config import Settings, get_settings
from citesync.core.exceptions import (
    CiteSyncError,
    InvalidStorageKeyError,
    ProcessorError,
    ProcessorRequestError,
    ProcessorResponseError,
    ProcessorTimeoutError,
    RecordDecodeError,
    StorageError,
)
from citesync.core.logging import configure_logging, get_logger


__all__ = [
    # Exceptions
    "CiteSyncError",
    "InvalidStorageKeyError",
    "ProcessorError",
    "ProcessorRequestError",
    "ProcessorResponseError",
    "ProcessorTimeoutError",
    "RecordDecodeError",
    # Configuration
    "Settings",
    "StorageError",
    # Logging
    "configure_logging",
    "get_logger",
    "get_settings",
]
