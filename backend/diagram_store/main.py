"""Diagram Store API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DiagramStoreError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Document store initialized on startup via lifespan context manager
    - Request bodies above settings.max_body_bytes rejected with 413, declared or chunked

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Static editor assets are served elsewhere; this process only owns /api/*
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from diagram_store.api.error_handlers import register_error_handlers
from diagram_store.api.middleware import BodySizeLimitMiddleware
from diagram_store.infrastructure.document_store import init_store
from diagram_store.infrastructure.observability import setup_logging
from diagram_store.config import get_settings
from diagram_store.api.routes import collections, config_documents, diagrams, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_store(
        settings.diagrams_path,
        diagrams_subdir=settings.diagrams_subdir,
        filters_subdir=settings.filters_subdir,
        config_filename=settings.config_filename,
        verify_writes=settings.verify_writes,
    )
    logger.info(
        "Diagram Store API started",
        extra={"path": str(settings.diagrams_path)},
    )
    yield
    logger.info("Diagram Store API shutting down")


app = FastAPI(
    title="Diagram Store API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()

# Body limit sits inside CORS so 413 responses still carry CORS headers
app.add_middleware(BodySizeLimitMiddleware, settings=settings)

# CORS — configured from settings, not hardcoded
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(diagrams.router)
app.include_router(collections.router)
app.include_router(config_documents.router)
