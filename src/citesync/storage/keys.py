"""Storage key conventions for persisted citation data.

Every key is scoped to a document identity:
- citations: the whole citation store, in document order
- csdata:    one serialized citation, keyed by citationID
- positions: demo peg positions, citationID -> peg index
- style:     the style ID chosen for the document
"""

from enum import Enum

from citesync.core.exceptions import InvalidStorageKeyError


class StorageKind(str, Enum):
    """Kinds of persisted citation data."""
    STORE = "citations:"
    RECORD = "csdata:"
    POSITIONS = "positions:"
    STYLE = "style:"


# Store, positions and style have one value per document
SINGLETON_KEY = "_"


def build_storage_key(kind: StorageKind | str, document_id: str, key: str = SINGLETON_KEY) -> str:
    """Build a storage key.

    Args:
        kind: One of the StorageKind prefixes
        document_id: Identity of the document the data belongs to
        key: Identifier within the document (a citationID for records)

    Returns:
        Formatted key: "{kind}{document_id}:{key}"

    Raises:
        InvalidStorageKeyError: If kind is unknown or a component is empty/malformed

    Example:
        >>> build_storage_key(StorageKind.RECORD, "paper-1", "cite-abc")
        'csdata:paper-1:cite-abc'
    """
    valid_kinds = {k.value for k in StorageKind}
    prefix = kind.value if isinstance(kind, StorageKind) else kind
    if prefix not in valid_kinds:
        raise InvalidStorageKeyError(
            f"Invalid storage kind '{prefix}'. Must be one of: {sorted(valid_kinds)}"
        )
    if not document_id:
        raise InvalidStorageKeyError("document_id cannot be empty")
    if ":" in document_id:
        raise InvalidStorageKeyError(f"document_id cannot contain ':' (got '{document_id}')")
    if not key:
        raise InvalidStorageKeyError("key cannot be empty")

    return f"{prefix}{document_id}:{key}"


def parse_storage_key(storage_key: str) -> tuple[StorageKind, str, str]:
    """Parse a storage key into its components.

    Args:
        storage_key: A key built by build_storage_key()

    Returns:
        Tuple of (kind, document_id, key)

    Raises:
        InvalidStorageKeyError: If the key format is invalid

    Example:
        >>> parse_storage_key("csdata:paper-1:cite-abc")
        (<StorageKind.RECORD: 'csdata:'>, 'paper-1', 'cite-abc')
    """
    for kind in StorageKind:
        if storage_key.startswith(kind.value):
            remainder = storage_key[len(kind.value):]
            parts = remainder.split(":", 1)
            if len(parts) != 2 or not parts[0] or not parts[1]:
                raise InvalidStorageKeyError(
                    f"Invalid storage key format: '{storage_key}'. "
                    f"Expected format: '{{kind}}{{document_id}}:{{key}}'"
                )
            return kind, parts[0], parts[1]

    raise InvalidStorageKeyError(f"Invalid storage key prefix in '{storage_key}'")
