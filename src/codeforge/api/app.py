"""FastAPI application factory for CodeForge."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from codeforge import __version__
from codeforge.api.middleware import RequestBodyLimitMiddleware, RequestTimingMiddleware
from codeforge.api.routers import preview, sessions, simulators
from codeforge.api.schemas import HealthResponse
from codeforge.compiler.pipeline import AssemblyPipeline
from codeforge.service.project_store import ProjectStore
from codeforge.service.session_manager import SessionManager
from codeforge.settings import Settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Run the session cleanup thread while the application is serving."""
    mgr: SessionManager = app.state.session_manager
    mgr.start()
    try:
        yield
    finally:
        mgr.stop()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="CodeForge",
        description="Turns generative-model output into sandboxed, runnable preview documents.",
        version=__version__,
        lifespan=lifespan,
    )
    pipeline = AssemblyPipeline.from_settings(settings)
    app.state.settings = settings
    app.state.pipeline = pipeline
    app.state.session_manager = SessionManager(
        ttl_seconds=settings.session_ttl_seconds,
        cleanup_interval=settings.session_cleanup_interval,
        store_factory=lambda: ProjectStore(pipeline),
    )

    # Middleware
    app.add_middleware(
        RequestBodyLimitMiddleware,
        text_limit=settings.max_text_body_bytes,
        default_limit=settings.max_body_bytes,
    )
    app.add_middleware(RequestTimingMiddleware)

    # Stateless preview endpoints
    app.include_router(preview.router, tags=["preview"])

    # Session-scoped endpoints
    app.include_router(sessions.router, prefix="/sessions", tags=["sessions"])

    app.include_router(simulators.router, prefix="/simulators", tags=["simulators"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger = logging.getLogger("codeforge.api")
    logger.info(
        "CodeForge API Server v%s starting (host=%s, port=%d)",
        __version__, settings.api_server_host, settings.effective_port,
    )

    uvicorn.run(
        "codeforge.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )
