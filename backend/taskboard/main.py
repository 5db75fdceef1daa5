"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from taskboard.api import api_router
from taskboard.core.config import Settings, get_settings
from taskboard.core.errors import ServiceError, UnauthorizedError
from taskboard.core.security import TokenSigner
from taskboard.db.base import Base
from taskboard.db.session import create_engine, create_session_factory

logger = logging.getLogger(__name__)


async def _service_error_handler(_: Request, exc: ServiceError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    engine = create_engine(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("%s %s ready", settings.app_name, settings.app_version)
        try:
            yield
        finally:
            await engine.dispose()

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.token_signer = TokenSigner(settings.secret_key, max_age=settings.access_token_max_age)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ServiceError, _service_error_handler)

    @app.get("/", tags=["app"])
    async def api_info() -> dict[str, str]:
        return {
            "message": "Task Management API",
            "version": settings.app_version,
            "status": "running",
            "documentation": "/docs",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/health", tags=["app"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    app.include_router(api_router)

    # A built frontend, if configured, is served from /app; API routes are matched first.
    if settings.static_dir:
        static_dir = Path(settings.static_dir)
        if static_dir.is_dir():
            app.mount("/app", StaticFiles(directory=str(static_dir), html=True), name="static")
        else:
            logger.warning("Static directory %s does not exist; frontend not mounted", static_dir)

    return app


app = create_app()
