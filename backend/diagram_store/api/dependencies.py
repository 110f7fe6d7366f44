"""Route Dependencies — service construction over the process-wide document store.

Invariants:
    - Services are cheap, stateless wrappers; one per request
    - Tests override get_store (app.dependency_overrides) to point at a tmp directory
"""

from fastapi import Depends

from diagram_store.infrastructure.document_store import DocumentStore, get_store
from diagram_store.services.collection_service import CollectionService
from diagram_store.services.config_service import ConfigService
from diagram_store.services.diagram_service import DiagramService


def get_diagram_service(store: DocumentStore = Depends(get_store)) -> DiagramService:
    return DiagramService(store)


def get_collection_service(
    diagrams: DiagramService = Depends(get_diagram_service),
) -> CollectionService:
    return CollectionService(diagrams)


def get_config_service(store: DocumentStore = Depends(get_store)) -> ConfigService:
    return ConfigService(store)
