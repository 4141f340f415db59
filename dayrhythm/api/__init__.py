"""
REST API layer for DayRhythm.

Provides:
- FastAPI application factory with an injected PlannerStore
- Envelope-shaped error handlers (400 for invalid input, 500 otherwise)
- API v1 router with all endpoints
- Root-level health check for infrastructure probes
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from dayrhythm import __version__
from dayrhythm.api.routes import router
from dayrhythm.api.schemas import error_response
from dayrhythm.config.settings import Settings
from dayrhythm.lib.errors import INTERNAL_ERROR, VALIDATION_ERROR
from dayrhythm.lib.exceptions import ValidationError
from dayrhythm.services.state_store import PlannerStore

logger = logging.getLogger(__name__)


def create_app(
    store: PlannerStore | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Store to serve (one is opened at settings.state_path if None)
        settings: Runtime settings (read from the environment if None)

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or Settings.from_env()
    owns_store = store is None
    if store is None:
        store = PlannerStore(settings.state_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        if owns_store:
            logger.info("Shutting down, flushing state to %s", store.path)
            store.close()

    app = FastAPI(
        title="DayRhythm",
        description="Day planner with energy budgets and overload detection",
        version=__version__,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        lifespan=lifespan,
    )
    app.state.store = store

    # -------------------------------------------------------------------------
    # Exception handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content=error_response(VALIDATION_ERROR, str(exc)))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=error_response(
                VALIDATION_ERROR,
                details={"errors": jsonable_encoder(exc.errors())},
            ),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=error_response(INTERNAL_ERROR))

    app.include_router(router)

    # Root-level health check, separate from /api/v1/health
    @app.get("/health")
    async def root_health_check() -> dict[str, str]:
        return {"status": "ok"}

    return app


__all__ = ["create_app", "router"]
