"""Document Keys — validation of storage keys before they become file names.

Invariants:
    - A valid key maps to exactly one file directly inside its kind's directory
    - Keys never contain path separators, never start with '.', never end in '.tmp'
    - Validation is pure: no filesystem access

Design Decisions:
    - Reject rather than sanitize: a silently rewritten key would persist a document
      under an id different from the one the caller addressed
"""

from diagram_store.core.domain_types import DocumentKey, TEMP_SUFFIX
from diagram_store.core.errors import InvalidDocumentKeyError

_MAX_KEY_LENGTH = 200
_FORBIDDEN_CHARS = frozenset("/\\\x00")


def validate_document_key(key: str) -> DocumentKey:
    """Return key as a DocumentKey or raise InvalidDocumentKeyError."""
    if not isinstance(key, str) or not key:
        raise InvalidDocumentKeyError(str(key), "key must be a non-empty string")
    if len(key) > _MAX_KEY_LENGTH:
        raise InvalidDocumentKeyError(
            key[:32] + "...", f"key longer than {_MAX_KEY_LENGTH} characters",
        )
    if any(ch in _FORBIDDEN_CHARS for ch in key):
        raise InvalidDocumentKeyError(key, "key must not contain path separators")
    if key.startswith("."):
        raise InvalidDocumentKeyError(key, "key must not start with '.'")
    if key.endswith(TEMP_SUFFIX):
        raise InvalidDocumentKeyError(key, f"'{TEMP_SUFFIX}' suffix is reserved")
    return DocumentKey(key)
