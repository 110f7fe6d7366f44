"""Diagram Service — read/merge/write orchestration for diagram documents.

Invariants:
    - Required-field gate runs before the existing document is read (rejected writes touch nothing)
    - POST-style saves deep-merge onto the stored document; PUT-style saves replace it
    - Every persisted diagram has id == key and list-typed collections
    - Merging onto a corrupt stored diagram raises CorruptDocumentError; replace repairs it
    - delete is idempotent

Design Decisions:
    - Impureim sandwich: store read (shell) → core.merge (pure) → store write (shell)
    - No version token or compare-and-swap: two concurrent saves to one id race at
      read-merge-write granularity and the last rename wins in full (ADR: single-user tool)
"""

import logging
from datetime import datetime, timezone

from diagram_store.core.document_keys import validate_document_key
from diagram_store.core.domain_types import (
    DocumentKind, ID_FIELD, JsonObject, UPDATED_AT_FIELD,
)
from diagram_store.core.errors import DocumentNotFoundError, InvalidDocumentError
from diagram_store.core.merge import (
    check_required_fields, normalize_diagram,
    prepare_diagram_replace, prepare_diagram_write,
)
from diagram_store.infrastructure.document_store import DocumentStore

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """Current UTC time as ISO 8601 with millisecond precision and 'Z'."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def require_object(body: object, what: str = "body") -> JsonObject:
    if not isinstance(body, dict):
        raise InvalidDocumentError(f"{what} must be a JSON object")
    return body


class DiagramService:
    """Diagram CRUD on top of the document store."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def list_diagrams(self) -> list[JsonObject]:
        return await self.store.list_all(DocumentKind.DIAGRAM)

    async def get_diagram(self, diagram_id: str) -> JsonObject:
        return await self.store.get(DocumentKind.DIAGRAM, diagram_id)

    async def find_diagram(self, diagram_id: str) -> JsonObject | None:
        """get_diagram, with None instead of DocumentNotFoundError."""
        try:
            return await self.get_diagram(diagram_id)
        except DocumentNotFoundError:
            return None

    async def save_diagram(self, diagram_id: str, patch: JsonObject) -> JsonObject:
        """Create or deep-merge-update a diagram."""
        key = validate_document_key(diagram_id)
        require_object(patch)
        check_required_fields(patch)
        existing = await self.find_diagram(key)
        diagram = prepare_diagram_write(key, existing, patch)
        await self.store.put(DocumentKind.DIAGRAM, key, diagram)
        logger.info(
            f"{'Updated' if existing is not None else 'Created'} diagram '{key}'",
            extra={"document_kind": DocumentKind.DIAGRAM.value, "document_key": key},
        )
        return diagram

    async def replace_diagram(self, diagram_id: str, document: JsonObject) -> JsonObject:
        """Create or fully replace a diagram (no fields inherited)."""
        key = validate_document_key(diagram_id)
        diagram = prepare_diagram_replace(key, require_object(document))
        await self.store.put(DocumentKind.DIAGRAM, key, diagram)
        logger.info(
            f"Replaced diagram '{key}'",
            extra={"document_kind": DocumentKind.DIAGRAM.value, "document_key": key},
        )
        return diagram

    async def update_attributes(
        self, diagram_id: str, attributes: JsonObject,
    ) -> JsonObject:
        """Shallow-assign attributes onto an existing diagram and bump updatedAt."""
        require_object(attributes, "attributes")
        diagram = await self.get_diagram(diagram_id)
        diagram.update(attributes)
        return await self.write_mutated(diagram_id, diagram)

    async def write_mutated(self, diagram_id: str, diagram: JsonObject) -> JsonObject:
        """Persist a read-modify-write result: pin id, bump updatedAt, normalize."""
        key = validate_document_key(diagram_id)
        diagram = dict(diagram)
        diagram[ID_FIELD] = key
        diagram[UPDATED_AT_FIELD] = utc_timestamp()
        diagram = normalize_diagram(diagram)
        await self.store.put(DocumentKind.DIAGRAM, key, diagram)
        return diagram

    async def delete_diagram(self, diagram_id: str) -> bool:
        return await self.store.delete(DocumentKind.DIAGRAM, diagram_id)
