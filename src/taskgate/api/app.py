"""
taskgate.api.app

FastAPI app factory.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Render every `AppError` (gate rejections included) as a JSON `{"message": ...}` body.
- Initialize and dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from taskgate.api.routers.admin import router as admin_router
from taskgate.api.routers.auth import router as auth_router
from taskgate.api.routers.health import router as health_router
from taskgate.api.routers.tasks import router as tasks_router
from taskgate.api.routers.users import router as users_router
from taskgate.db.init_db import init_db
from taskgate.db.session import create_engine, create_sessionmaker
from taskgate.errors import AppError
from taskgate.observability.logging import configure_logging, get_logger
from taskgate.observability.middleware import RequestContextMiddleware
from taskgate.settings import Settings

log = get_logger(__name__)


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(_: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_body(), headers=exc.headers
        )

    @app.exception_handler(Exception)
    async def _unhandled(_: Request, exc: Exception) -> JSONResponse:
        log.exception("request.unhandled_error", error=str(exc))
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "internal server error"},
        )


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Prod is expected to provision the schema out of band.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="taskgate",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)
    install_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(tasks_router)
    app.include_router(users_router)
    app.include_router(admin_router)

    return app
