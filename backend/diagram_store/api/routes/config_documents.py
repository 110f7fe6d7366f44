"""Config & Diagram Filter Routes — single documents, wholesale overwrite.

Invariants:
    - GET /api/config returns {} when no config has been saved
    - GET /api/diagram-filters/{id} returns 404 when absent
    - POST and PUT are synonyms: both replace the whole document (never merge)
    - DELETE /api/diagram-filters/{id} is idempotent
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from diagram_store.api.dependencies import get_config_service
from diagram_store.schemas.responses import DeleteResponse, OkResponse
from diagram_store.services.config_service import ConfigService

router = APIRouter(prefix="/api", tags=["config"])


@router.get("/config")
async def get_config(service: ConfigService = Depends(get_config_service)):
    return await service.get_config()


@router.api_route("/config", methods=["POST", "PUT"], response_model=OkResponse)
async def save_config(
    body: dict[str, Any] = Body(...),
    service: ConfigService = Depends(get_config_service),
):
    await service.save_config(body)
    return OkResponse()


@router.get("/diagram-filters/{diagram_id}")
async def get_diagram_filter(
    diagram_id: str, service: ConfigService = Depends(get_config_service),
):
    return await service.get_filter(diagram_id)


@router.api_route(
    "/diagram-filters/{diagram_id}", methods=["POST", "PUT"],
    response_model=OkResponse,
)
async def save_diagram_filter(
    diagram_id: str,
    body: dict[str, Any] = Body(...),
    service: ConfigService = Depends(get_config_service),
):
    await service.save_filter(diagram_id, body)
    return OkResponse()


@router.delete("/diagram-filters/{diagram_id}", response_model=DeleteResponse)
async def delete_diagram_filter(
    diagram_id: str, service: ConfigService = Depends(get_config_service),
):
    deleted = await service.delete_filter(diagram_id)
    return DeleteResponse(deleted=deleted)
