"""Collection Service — item-level operations on a diagram's nested collections.

Invariants:
    - Every mutation is a read-modify-write of ONE owning diagram through DiagramService
    - Every mutation bumps the owning diagram's updatedAt
    - Mutating a missing diagram raises DocumentNotFoundError (nothing created)
    - update_item locates the owner by scanning all diagrams: first match wins

Design Decisions:
    - Pure list edits live in core.collection_items; this module only sequences IO
    - find_owner is public and separately named: its O(total items) scan and race with
      concurrent writers are visible to callers (ADR: no hidden secondary index)
"""

import logging
from collections.abc import Callable

from diagram_store.core import collection_items as items_core
from diagram_store.core.collection_index import find_owner as scan_for_owner
from diagram_store.core.domain_types import (
    Collection, DocumentKey, DocumentKind, JsonObject,
)
from diagram_store.core.errors import ItemNotFoundError
from diagram_store.services.diagram_service import DiagramService, require_object

logger = logging.getLogger(__name__)

Mutator = Callable[[JsonObject], JsonObject]


class CollectionService:
    """tables / relationships / dependencies / areas / customTypes operations."""

    def __init__(self, diagrams: DiagramService):
        self.diagrams = diagrams

    async def mutate_diagram(self, diagram_id: str, mutator: Mutator) -> JsonObject:
        diagram = await self.diagrams.get_diagram(diagram_id)
        return await self.diagrams.write_mutated(diagram_id, mutator(diagram))

    # ─── Reads ───────────────────────────────────────────────────

    async def list_items(
        self, diagram_id: str, collection: Collection,
    ) -> list[JsonObject]:
        diagram = await self.diagrams.get_diagram(diagram_id)
        return items_core.get_items(diagram, collection)

    async def get_item(
        self, diagram_id: str, collection: Collection, item_id: str,
    ) -> JsonObject:
        diagram = await self.diagrams.get_diagram(diagram_id)
        item = items_core.find_item(diagram, collection, item_id)
        if item is None:
            raise ItemNotFoundError(collection.value, item_id)
        return item

    async def find_owner(self, item_id: str, collection: Collection) -> DocumentKey:
        """Key of the first diagram (by key order) whose collection holds item_id."""
        documents = await self.diagrams.store.list_all(DocumentKind.DIAGRAM)
        owner = scan_for_owner(documents, item_id, collection)
        if owner is None:
            raise ItemNotFoundError(collection.value, item_id)
        return owner

    # ─── Mutations addressed by diagram id ───────────────────────

    async def add_item(
        self, diagram_id: str, collection: Collection, item: JsonObject,
    ) -> JsonObject:
        items_core.validate_item(collection, item)
        await self.mutate_diagram(
            diagram_id, lambda d: items_core.append_item(d, collection, item),
        )
        return item

    async def put_item(
        self, diagram_id: str, collection: Collection, item: JsonObject,
    ) -> JsonObject:
        items_core.validate_item(collection, item)
        await self.mutate_diagram(
            diagram_id, lambda d: items_core.put_item(d, collection, item),
        )
        return item

    async def delete_item(
        self, diagram_id: str, collection: Collection, item_id: str,
    ) -> None:
        await self.mutate_diagram(
            diagram_id, lambda d: items_core.remove_item(d, collection, item_id),
        )

    async def clear_items(self, diagram_id: str, collection: Collection) -> None:
        await self.mutate_diagram(
            diagram_id, lambda d: items_core.clear_items(d, collection),
        )

    # ─── Mutations addressed by item id ──────────────────────────

    async def update_item(
        self, item_id: str, collection: Collection, attributes: JsonObject,
    ) -> JsonObject:
        """Shallow-assign attributes onto the item wherever it lives."""
        require_object(attributes, "attributes")
        owner = await self.find_owner(item_id, collection)
        diagram = await self.mutate_diagram(
            owner,
            lambda d: items_core.assign_item_attributes(
                d, collection, item_id, attributes,
            ),
        )
        logger.info(
            f"Updated {collection.value} item '{item_id}' in diagram '{owner}'",
            extra={
                "document_key": owner, "collection": collection.value,
                "item_id": item_id,
            },
        )
        return items_core.find_item(diagram, collection, item_id)
