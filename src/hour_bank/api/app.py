"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hour_bank import __version__
from hour_bank.api.routes import (
    auth_router,
    balances_router,
    batches_router,
    employees_router,
    health_router,
    records_router,
    settings_router,
)
from hour_bank.config import get_settings
from hour_bank.database import create_schema, dispose_db, get_session, init_db
from hour_bank.services.settings_service import SettingsService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    settings = get_settings()
    init_db()
    if settings.auto_create_schema:
        await create_schema()
    if settings.seed_picklists:
        async with get_session() as session:
            await SettingsService(session).seed_defaults()
    yield
    # Shutdown
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Hour Bank API",
        description="Hour bank administration: occurrences, balances and reports",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(employees_router, prefix="/api/v1")
    app.include_router(records_router, prefix="/api/v1")
    app.include_router(batches_router, prefix="/api/v1")
    app.include_router(balances_router, prefix="/api/v1")
    app.include_router(settings_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
