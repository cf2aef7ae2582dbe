"""Fulfilment REST API — FastAPI application factory."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fulfilment import __version__
from fulfilment.api.deps import create_tables, dispose_engine, init_session_factory
from fulfilment.api.errors import register_error_handlers
from fulfilment.api.middleware.request_id import RequestIDMiddleware
from fulfilment.api.routers import stores
from fulfilment.core.logging import setup_logging

log = structlog.get_logger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: init DB and create missing tables. Shutdown: dispose engine."""
    init_session_factory()
    await create_tables()
    log.info("app.started", version=__version__)
    yield
    await dispose_engine()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging()

    app = FastAPI(title="Fulfilment Stores", version=__version__, lifespan=_lifespan)

    register_error_handlers(app)

    cors_origins = os.environ.get("FULFILMENT_CORS_ORIGINS", "http://localhost:3000")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cors_origins.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(stores.router, prefix="/stores", tags=["stores"])

    return app
