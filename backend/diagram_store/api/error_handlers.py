"""Error Handlers — every failed request leaves the API as one JSON error envelope.

Invariants:
    - Envelope: {"error": {"code", "message", "category", "severity"[, "details"]}}
    - DiagramStoreError keeps its own http_status; 5xx logged at ERROR, 4xx at WARNING
    - A body FastAPI cannot bind (non-object JSON, unparseable text) is 400
      VALIDATION_ERROR; the framework's 422 never reaches clients
    - Anything else is 500 INTERNAL_ERROR; exception text, paths and tracebacks
      stay in the logs

Design Decisions:
    - Handlers are plain module functions registered with add_exception_handler,
      so each can be called directly with a fake request
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from diagram_store.core.errors import DiagramStoreError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)


def error_envelope(
    code: str,
    message: str,
    category: ErrorCategory,
    severity: ErrorSeverity,
    details: list | dict | None = None,
) -> dict:
    error = {
        "code": code,
        "message": message,
        "category": category.value,
        "severity": severity.value,
    }
    if details:
        error["details"] = details
    return {"error": error}


async def handle_store_error(request: Request, exc: DiagramStoreError) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_unbindable_body(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    problems = [
        {
            "field": ".".join(str(part) for part in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Unbindable request on {request.method} {request.url.path}: "
        f"{', '.join(p['field'] + ' ' + p['type'] for p in problems)}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_envelope(
            "VALIDATION_ERROR", "Request does not match the expected shape",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, problems,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DiagramStoreError, handle_store_error)
    app.add_exception_handler(RequestValidationError, handle_unbindable_body)
    app.add_exception_handler(Exception, handle_unexpected_error)
