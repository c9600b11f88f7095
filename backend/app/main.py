"""FastAPI application factory."""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api.health import get_health
from backend.app.api.organizations import router as organizations_router
from backend.app.config import get_settings
from backend.app.hierarchy.exceptions import InvalidHierarchyError, OrganizationNotFoundError
from backend.app.organizations.exceptions import (
    DuplicateBusinessIdError,
    OrganizationValidationError,
)
from backend.app.security.permissions import PermissionDeniedError

logger = logging.getLogger(__name__)


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


def register_exception_handlers(app: FastAPI) -> None:
    """Map organization register errors to HTTP responses."""

    @app.exception_handler(PermissionDeniedError)
    async def permission_denied(request: Request, exc: PermissionDeniedError) -> JSONResponse:
        return _error(status.HTTP_403_FORBIDDEN, str(exc))

    @app.exception_handler(OrganizationNotFoundError)
    async def not_found(request: Request, exc: OrganizationNotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(DuplicateBusinessIdError)
    async def duplicate_business_id(
        request: Request, exc: DuplicateBusinessIdError
    ) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(OrganizationValidationError)
    async def validation_failed(
        request: Request, exc: OrganizationValidationError
    ) -> JSONResponse:
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))

    @app.exception_handler(InvalidHierarchyError)
    async def invalid_hierarchy(request: Request, exc: InvalidHierarchyError) -> JSONResponse:
        # Corrupt stored data, not a client error
        logger.error(f"Invalid organization hierarchy on {request.url.path}: {exc}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Organization data is inconsistent")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title="Organization Register API",
        description="Organization hierarchy register - Backend API",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ui_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthz")
    async def healthz() -> dict[str, Any]:
        """Health check endpoint."""
        result = await get_health()
        return result.model_dump()

    app.include_router(organizations_router)
    register_exception_handlers(app)

    return app


# Create app instance for uvicorn
app = create_app()
