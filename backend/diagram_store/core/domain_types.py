"""Domain Types — rich types that replace bare strings across the store.

Invariants:
    - DocumentKey is the storage key AND the persisted id of a document
    - Every diagram collection is named by a Collection member — no raw string matching
    - REQUIRED_DIAGRAM_FIELDS is the fixed gate for create-or-update writes

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and match URL path segments without custom encoders
    - Collection values use the camelCase names stored in the JSON documents
"""

from enum import Enum
from typing import Any, NewType


# ─── Identity Types ──────────────────────────────────────────────

DocumentKey = NewType("DocumentKey", str)
ItemId = NewType("ItemId", str)

JsonObject = dict[str, Any]


# ─── Enums ───────────────────────────────────────────────────────

class DocumentKind(str, Enum):
    """Logical document families, each with its own on-disk location."""
    DIAGRAM = "diagram"
    DIAGRAM_FILTER = "diagram_filter"
    CONFIG = "config"


class Collection(str, Enum):
    """Ordered item sequences nested inside a diagram document."""
    TABLES = "tables"
    RELATIONSHIPS = "relationships"
    DEPENDENCIES = "dependencies"
    AREAS = "areas"
    CUSTOM_TYPES = "customTypes"


# ─── Constants ───────────────────────────────────────────────────

ID_FIELD = "id"
UPDATED_AT_FIELD = "updatedAt"

REQUIRED_DIAGRAM_FIELDS: tuple[str, ...] = (
    "name", "databaseType", "createdAt", "updatedAt",
)

TABLE_DEFAULTS: dict[str, Any] = {
    "fields": [],
    "indexes": [],
    "x": 0,
    "y": 0,
}

TEMP_SUFFIX = ".tmp"
DOCUMENT_SUFFIX = ".json"
