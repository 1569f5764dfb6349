"""FastAPI application factory for projectlint."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from projectlint import __version__
from projectlint.api.deps import (
    init_session_manager,
    lint_session_factory,
    reset_session_manager,
)
from projectlint.api.middleware import RequestBodyLimitMiddleware, RequestTimingMiddleware
from projectlint.api.routers import sessions
from projectlint.api.schemas import HealthResponse
from projectlint.service.session_manager import SessionManager
from projectlint.settings import Settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Start/stop the SessionManager alongside the application."""
    settings: Settings = app.state.settings
    mgr = SessionManager(
        lint_session_factory(settings),
        ttl_seconds=settings.session_ttl_seconds,
        cleanup_interval=settings.session_cleanup_interval,
    )
    mgr.start()
    init_session_manager(mgr, disable_session_list=settings.disable_session_list)
    try:
        yield
    finally:
        mgr.stop()
        reset_session_manager()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="projectlint",
        description="Project-aware HTML lint orchestration over html-validate.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(RequestBodyLimitMiddleware)

    # Session-scoped endpoints
    app.include_router(sessions.router, prefix="/sessions", tags=["sessions"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger = logging.getLogger("projectlint.api")
    logger.info(
        "projectlint API Server v%s starting (host=%s, port=%d)",
        __version__, settings.api_server_host, settings.effective_port,
    )

    uvicorn.run(
        "projectlint.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )
