"""
irtf_records.api.app

FastAPI app factory for the records service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Create and dispose the engines of both databases.
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from irtf_records import __version__
from irtf_records.api.routers.feedback import router as feedback_router
from irtf_records.api.routers.health import router as health_router
from irtf_records.api.routers.schedule import router as schedule_router
from irtf_records.db.errors import StorageError
from irtf_records.db.init_db import init_db
from irtf_records.db.session import create_engine, create_sessionmaker
from irtf_records.observability.logging import configure_logging, get_logger
from irtf_records.observability.middleware import RequestContextMiddleware
from irtf_records.settings import Settings

log = get_logger(__name__)


async def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("storage_error", error=str(exc))
    return JSONResponse(status_code=HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)})


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engines = {
            "feedback": create_engine(settings.feedback_database_url),
            "troublelog": create_engine(settings.troublelog_database_url),
        }
        app.state.settings = settings
        for name, engine in engines.items():
            setattr(app.state, f"{name}_engine", engine)
            setattr(app.state, f"{name}_sessionmaker", create_sessionmaker(engine))
            if settings.env in ("dev", "test"):
                # Dev/test convenience; prod runs Alembic per database.
                await init_db(engine, database=name)
        try:
            yield
        finally:
            for engine in engines.values():
                await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="IRTF Records",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.include_router(health_router, tags=["health"])
    app.include_router(feedback_router)
    app.include_router(schedule_router)
    return app


# --- Module Notes -----------------------------------------------------------
# Any StorageError a router does not translate itself becomes a 500 with the
# error text, so a failed feedback transaction is always visible to the caller.
