"""Merge Engine — pure partial-update semantics for diagram documents.

Invariants:
    - deep_merge never mutates existing or patch; nested objects are fresh dicts
    - Objects merge recursively; arrays, scalars and null REPLACE wholesale
    - Keys absent from the patch are inherited from existing
    - prepare_diagram_write forces id == storage key after merge
    - Every diagram collection is a list after normalization (never a map, never null)

Design Decisions:
    - Wholesale array replacement over element-wise merge: a patch that wants to keep
      a collection omits it; an empty list clears it (ADR: one canonical policy)
    - Required-field gate runs BEFORE any read or merge: a rejected write touches nothing
    - Non-list collections are rejected at the write boundary instead of coerced
"""

import copy
from typing import Any

from diagram_store.core.domain_types import (
    Collection, DocumentKey, ID_FIELD, JsonObject,
    REQUIRED_DIAGRAM_FIELDS, TABLE_DEFAULTS,
)
from diagram_store.core.errors import InvalidCollectionError, MissingFieldsError


def deep_merge(existing: JsonObject, patch: JsonObject) -> JsonObject:
    """Apply patch onto existing, returning a new object."""
    return _merge_into(copy.deepcopy(existing), patch)


def _merge_into(target: JsonObject, patch: JsonObject) -> JsonObject:
    for key, value in patch.items():
        if isinstance(value, dict):
            current = target.get(key)
            # type mismatch (or absent): merge onto an empty object == replace
            target[key] = _merge_into(
                current if isinstance(current, dict) else {}, value,
            )
        else:
            target[key] = copy.deepcopy(value)
    return target


def missing_required_fields(document: JsonObject) -> list[str]:
    """Required root fields absent from document, in declaration order."""
    return [f for f in REQUIRED_DIAGRAM_FIELDS if f not in document]


def check_required_fields(document: JsonObject) -> None:
    """Raise MissingFieldsError when any required root field is absent."""
    missing = missing_required_fields(document)
    if missing:
        raise MissingFieldsError(missing)


def normalize_table(table: Any) -> JsonObject:
    """Fill table defaults (fields, indexes, x, y) without touching present values."""
    if not isinstance(table, dict):
        raise InvalidCollectionError(
            Collection.TABLES.value, "every table must be an object",
        )
    normalized = dict(table)
    for key, default in TABLE_DEFAULTS.items():
        if normalized.get(key) is None:
            normalized[key] = copy.deepcopy(default)
    return normalized


def normalize_diagram(document: JsonObject) -> JsonObject:
    """Initialize absent collections to [] and fill table defaults."""
    normalized = dict(document)
    for collection in Collection:
        items = normalized.get(collection.value)
        if items is None:
            normalized[collection.value] = []
        elif not isinstance(items, list):
            raise InvalidCollectionError(
                collection.value,
                f"expected a list, got {type(items).__name__}",
            )
    normalized[Collection.TABLES.value] = [
        normalize_table(t) for t in normalized[Collection.TABLES.value]
    ]
    return normalized


def prepare_diagram_write(
    key: DocumentKey, existing: JsonObject | None, patch: JsonObject,
) -> JsonObject:
    """Gate, merge, pin the id, normalize. Pure — caller persists the result."""
    check_required_fields(patch)
    merged = deep_merge(existing or {}, patch)
    merged[ID_FIELD] = key
    return normalize_diagram(merged)


def prepare_diagram_replace(key: DocumentKey, document: JsonObject) -> JsonObject:
    """Full replacement: same gate and normalization, no inherited fields."""
    return prepare_diagram_write(key, None, document)
