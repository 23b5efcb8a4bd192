from __future__ import annotations

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .schemas import INTERNAL_ERROR_MESSAGE

log = structlog.get_logger(__name__)

ROUTE_NOT_FOUND_MESSAGE = "Route not found"
INVALID_JSON_MESSAGE = "Invalid JSON body"
INVALID_REQUEST_MESSAGE = "Invalid request"


# PUBLIC_INTERFACE
async def error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler for errors that escaped the controller.

    Answers with the error's message and its ``status_code`` attribute,
    defaulting to 500.
    """
    status_code = getattr(exc, "status_code", status.HTTP_500_INTERNAL_SERVER_ERROR)
    if not isinstance(status_code, int):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = getattr(exc, "message", None) or str(exc) or INTERNAL_ERROR_MESSAGE
    log.error("Unhandled error", path=request.url.path, status_code=status_code, exc_info=exc)
    return JSONResponse(status_code=status_code, content={"error": message})


# PUBLIC_INTERFACE
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unmatched routes become 404 {"error": "Route not found"}."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = ROUTE_NOT_FOUND_MESSAGE
    else:
        message = str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)


# PUBLIC_INTERFACE
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are answered with 400 and the uniform error shape."""
    if any(err.get("type") == "json_invalid" for err in exc.errors()):
        message = INVALID_JSON_MESSAGE
    else:
        message = INVALID_REQUEST_MESSAGE
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})
