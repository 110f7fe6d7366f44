"""Diagram Routes — list/get/save/replace/patch/delete of diagram documents.

Invariants:
    - POST deep-merges onto the stored diagram; PUT replaces it; both require
      name, databaseType, createdAt, updatedAt in the body
    - PATCH shallow-assigns attributes onto an existing diagram (404 if missing)
    - DELETE is idempotent (200 whether or not the file existed)
    - Bodies must be JSON objects (400 otherwise)
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from diagram_store.api.dependencies import get_diagram_service
from diagram_store.schemas.responses import DeleteResponse, OkResponse
from diagram_store.services.diagram_service import DiagramService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/diagrams", tags=["diagrams"])


@router.get("")
async def list_diagrams(service: DiagramService = Depends(get_diagram_service)):
    """Every readable diagram, id taken from the file name."""
    return await service.list_diagrams()


@router.get("/{diagram_id}")
async def get_diagram(
    diagram_id: str, service: DiagramService = Depends(get_diagram_service),
):
    return await service.get_diagram(diagram_id)


@router.post("/{diagram_id}", response_model=OkResponse)
async def save_diagram(
    diagram_id: str,
    body: dict[str, Any] = Body(...),
    service: DiagramService = Depends(get_diagram_service),
):
    """Create or deep-merge-update. Arrays in the body replace stored arrays."""
    await service.save_diagram(diagram_id, body)
    return OkResponse()


@router.put("/{diagram_id}", response_model=OkResponse)
async def replace_diagram(
    diagram_id: str,
    body: dict[str, Any] = Body(...),
    service: DiagramService = Depends(get_diagram_service),
):
    await service.replace_diagram(diagram_id, body)
    return OkResponse()


@router.patch("/{diagram_id}")
async def update_diagram(
    diagram_id: str,
    body: dict[str, Any] = Body(...),
    service: DiagramService = Depends(get_diagram_service),
):
    """Shallow attribute update; returns the stored diagram."""
    return await service.update_attributes(diagram_id, body)


@router.delete("/{diagram_id}", response_model=DeleteResponse)
async def delete_diagram(
    diagram_id: str, service: DiagramService = Depends(get_diagram_service),
):
    deleted = await service.delete_diagram(diagram_id)
    return DeleteResponse(deleted=deleted)
