from __future__ import annotations

from datetime import datetime, timezone

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import AppError
from .handlers import error_handler, http_exception_handler, validation_exception_handler
from .logging_config import setup_logging
from .routers import todos as todos_router
from .schemas import HealthOut
from .settings import get_settings

log = structlog.get_logger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "todos", "description": "CRUD operations for Todo items."},
]


# PUBLIC_INTERFACE
def create_app() -> FastAPI:
    """Build the FastAPI application: logging, CORS, error handlers and routes."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Todo Service",
        description="CRUD service for todo items backed by a relational store.",
        version="1.0.0",
        openapi_tags=openapi_tags,
    )

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(AppError, error_handler)
    app.add_exception_handler(Exception, error_handler)

    # PUBLIC_INTERFACE
    @app.get("/health", response_model=HealthOut, summary="Health Check", tags=["health"])
    def health_check() -> HealthOut:
        """
        Health check endpoint.

        Returns:
            A JSON object with the service status and the current UTC time.
        """
        return HealthOut(status="OK", timestamp=datetime.now(timezone.utc).isoformat())

    app.include_router(todos_router.router)
    return app


app = create_app()


# PUBLIC_INTERFACE
def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST:PORT."""
    settings = get_settings()
    log.info(
        "Todo service starting",
        host=settings.host,
        port=settings.port,
        backend=settings.persistence_backend,
        health=f"http://localhost:{settings.port}/health",
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
