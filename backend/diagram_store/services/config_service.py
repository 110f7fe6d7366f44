"""Config & Filter Service — single untyped documents, wholesale overwrite.

Invariants:
    - Config and diagram filters are NEVER merged: every save replaces the whole document
    - Missing config reads as {}; missing filter raises DocumentNotFoundError
    - Filter delete is idempotent
    - Writes go through the same atomic writer as diagrams
"""

import logging

from diagram_store.core.domain_types import DocumentKind, JsonObject
from diagram_store.core.errors import DocumentNotFoundError
from diagram_store.infrastructure.document_store import CONFIG_KEY, DocumentStore
from diagram_store.services.diagram_service import require_object

logger = logging.getLogger(__name__)


class ConfigService:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def get_config(self) -> JsonObject:
        try:
            return await self.store.get(DocumentKind.CONFIG, CONFIG_KEY)
        except DocumentNotFoundError:
            return {}

    async def save_config(self, config: JsonObject) -> None:
        await self.store.put(DocumentKind.CONFIG, CONFIG_KEY, require_object(config))
        logger.info("Saved config", extra={"document_kind": DocumentKind.CONFIG.value})

    async def get_filter(self, diagram_id: str) -> JsonObject:
        return await self.store.get(DocumentKind.DIAGRAM_FILTER, diagram_id)

    async def save_filter(self, diagram_id: str, diagram_filter: JsonObject) -> None:
        await self.store.put(
            DocumentKind.DIAGRAM_FILTER, diagram_id, require_object(diagram_filter),
        )

    async def delete_filter(self, diagram_id: str) -> bool:
        return await self.store.delete(DocumentKind.DIAGRAM_FILTER, diagram_id)
