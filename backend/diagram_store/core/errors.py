"""Error Hierarchy — typed, categorized exceptions for every store failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; storage errors (500-level) are critical
    - to_response() produces the REST envelope consumed by the global handler
    - No filesystem paths leaked in user-facing messages

Design Decisions:
    - Single hierarchy with DiagramStoreError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: document/collection context for logs without coupling to logging
    - Missing documents on delete are NOT errors — callers never see DocumentNotFoundError there
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STORAGE = "storage"
    CORRUPTION = "corruption"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    document_kind: str | None = None
    document_key: str | None = None
    collection: str | None = None
    item_id: str | None = None
    debug_info: dict[str, Any] | None = None


class DiagramStoreError(Exception):
    """Base exception for all store errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def details(self) -> dict | None:
        """Error-specific payload merged into the response envelope."""
        return None

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "document_kind": self.context.document_kind,
                "document_key": self.context.document_key,
                "collection": self.context.collection,
                "item_id": self.context.item_id,
            },
        }
        details = self.details()
        if details:
            body["details"] = details
        return {"error": body}


# ─── Client Errors (400-level) ──────────────────────────────────

class MissingFieldsError(DiagramStoreError):
    """Create-or-update body lacks one or more required root fields."""
    def __init__(self, missing_fields: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Missing required fields: {', '.join(missing_fields)}",
            "MISSING_REQUIRED_FIELDS", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.missing_fields = missing_fields

    def details(self) -> dict:
        return {"missing_fields": self.missing_fields}


class InvalidDocumentKeyError(DiagramStoreError):
    """Document key cannot be mapped safely to a file name."""
    def __init__(self, key: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid document key '{key}': {reason}",
            "INVALID_DOCUMENT_KEY", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.key = key


class InvalidCollectionError(DiagramStoreError):
    """A collection field or item does not have the sequence/object shape required."""
    def __init__(self, collection: str, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.collection = collection
        super().__init__(
            f"Invalid '{collection}' collection: {reason}",
            "INVALID_COLLECTION", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ctx, 400,
        )
        self.collection = collection


class InvalidDocumentError(DiagramStoreError):
    """Request body is not a JSON object."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid document: {reason}",
            "INVALID_DOCUMENT", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class PayloadTooLargeError(DiagramStoreError):
    """Request body exceeds the configured limit."""
    def __init__(self, max_bytes: int, context: ErrorContext | None = None):
        super().__init__(
            f"Request body exceeds {max_bytes} bytes",
            "PAYLOAD_TOO_LARGE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 413,
        )
        self.max_bytes = max_bytes


# ─── Not Found (404)────────────────────────────────────────────

class DocumentNotFoundError(DiagramStoreError):
    """Requested document does not exist."""
    def __init__(self, kind: str, key: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.document_kind = kind
        ctx.document_key = key
        super().__init__(
            f"{kind} '{key}' not found",
            "DOCUMENT_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, ctx, 404,
        )
        self.kind = kind
        self.key = key


class ItemNotFoundError(DiagramStoreError):
    """No diagram contains the requested collection item."""
    def __init__(self, collection: str, item_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.collection = collection
        ctx.item_id = item_id
        super().__init__(
            f"No diagram contains {collection} item '{item_id}'",
            "ITEM_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, ctx, 404,
        )
        self.collection = collection
        self.item_id = item_id


class UnknownCollectionError(DiagramStoreError):
    """Collection name is not one of the diagram collections."""
    def __init__(self, name: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unknown collection '{name}'",
            "UNKNOWN_COLLECTION", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.name = name


# ─── Storage Errors (500-level) ─────────────────────────────────

class StorageIOError(DiagramStoreError):
    """Filesystem operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_IO_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class CorruptDocumentError(DiagramStoreError):
    """Stored file exists but is not a parseable JSON object."""
    def __init__(self, kind: str, key: str, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.document_kind = kind
        ctx.document_key = key
        super().__init__(
            f"{kind} '{key}' is corrupt: {reason}",
            "CORRUPT_DOCUMENT", ErrorCategory.CORRUPTION,
            ErrorSeverity.CRITICAL, ctx, 500,
        )


class WriteVerificationError(DiagramStoreError):
    """Document was renamed into place but could not be re-read and parsed."""
    def __init__(self, kind: str, key: str, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.document_kind = kind
        ctx.document_key = key
        super().__init__(
            f"Failed to verify saved {kind} '{key}': {reason}",
            "WRITE_VERIFICATION_FAILED", ErrorCategory.CORRUPTION,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
