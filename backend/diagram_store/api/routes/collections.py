"""Collection Routes — item operations on tables, relationships, dependencies, areas, customTypes.

Invariants:
    - /api/diagrams/{id}/{collection}[/{item_id}] address items through their diagram
    - /api/items/{collection}/{item_id} address items without knowing the diagram
      (owner located by a full scan, first match wins)
    - Unknown collection names → 404 UNKNOWN_COLLECTION
    - Every mutation bumps the owning diagram's updatedAt
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from diagram_store.api.dependencies import get_collection_service
from diagram_store.core.collection_items import parse_collection
from diagram_store.core.domain_types import ID_FIELD
from diagram_store.core.errors import InvalidCollectionError
from diagram_store.schemas.responses import OkResponse, OwnerResponse
from diagram_store.services.collection_service import CollectionService

router = APIRouter(prefix="/api", tags=["collections"])


@router.get("/diagrams/{diagram_id}/{collection}")
async def list_items(
    diagram_id: str,
    collection: str,
    service: CollectionService = Depends(get_collection_service),
):
    return await service.list_items(diagram_id, parse_collection(collection))


@router.post("/diagrams/{diagram_id}/{collection}")
async def add_item(
    diagram_id: str,
    collection: str,
    item: dict[str, Any] = Body(...),
    service: CollectionService = Depends(get_collection_service),
):
    """Append an item to the collection."""
    return await service.add_item(diagram_id, parse_collection(collection), item)


@router.delete("/diagrams/{diagram_id}/{collection}", response_model=OkResponse)
async def clear_items(
    diagram_id: str,
    collection: str,
    service: CollectionService = Depends(get_collection_service),
):
    await service.clear_items(diagram_id, parse_collection(collection))
    return OkResponse()


@router.get("/diagrams/{diagram_id}/{collection}/{item_id}")
async def get_item(
    diagram_id: str,
    collection: str,
    item_id: str,
    service: CollectionService = Depends(get_collection_service),
):
    return await service.get_item(diagram_id, parse_collection(collection), item_id)


@router.put("/diagrams/{diagram_id}/{collection}/{item_id}")
async def put_item(
    diagram_id: str,
    collection: str,
    item_id: str,
    item: dict[str, Any] = Body(...),
    service: CollectionService = Depends(get_collection_service),
):
    """Replace the item with this id, or append it."""
    parsed = parse_collection(collection)
    if item.setdefault(ID_FIELD, item_id) != item_id:
        raise InvalidCollectionError(parsed.value, "body id does not match path id")
    return await service.put_item(diagram_id, parsed, item)


@router.delete(
    "/diagrams/{diagram_id}/{collection}/{item_id}", response_model=OkResponse,
)
async def delete_item(
    diagram_id: str,
    collection: str,
    item_id: str,
    service: CollectionService = Depends(get_collection_service),
):
    await service.delete_item(diagram_id, parse_collection(collection), item_id)
    return OkResponse()


@router.patch("/items/{collection}/{item_id}")
async def update_item(
    collection: str,
    item_id: str,
    attributes: dict[str, Any] = Body(...),
    service: CollectionService = Depends(get_collection_service),
):
    """Update an item by id alone; its owning diagram is found by scanning."""
    return await service.update_item(item_id, parse_collection(collection), attributes)


@router.get("/items/{collection}/{item_id}/owner", response_model=OwnerResponse)
async def find_owner(
    collection: str,
    item_id: str,
    service: CollectionService = Depends(get_collection_service),
):
    parsed = parse_collection(collection)
    owner = await service.find_owner(item_id, parsed)
    return OwnerResponse(collection=parsed.value, item_id=item_id, diagram_id=owner)
