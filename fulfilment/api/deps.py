"""Dependency injection — session, service and gateway singletons."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from fulfilment.core.database import Base
from fulfilment.dao.store_dao import StoreDAO
from fulfilment.legacy.gateway import LegacyStoreManagerGateway
from fulfilment.services.store_service import StoreService

DEFAULT_DATABASE_URL = "postgresql+asyncpg://localhost/fulfilment"

# ---------------------------------------------------------------------------
# Singletons
# ---------------------------------------------------------------------------
_store_dao = StoreDAO()
_store_service = StoreService(_store_dao)
_legacy_gateway = LegacyStoreManagerGateway()

# ---------------------------------------------------------------------------
# Engine / session factory (initialised by app lifespan)
# ---------------------------------------------------------------------------
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_session_factory(database_url: str | None = None) -> async_sessionmaker[AsyncSession]:
    """Create the async engine and session factory. Called once at startup."""
    global _engine, _session_factory  # noqa: PLW0603
    url = database_url or os.environ.get("FULFILMENT_DATABASE_URL", DEFAULT_DATABASE_URL)
    options: dict = {"pool_pre_ping": True}
    if not url.startswith("sqlite"):
        options.update(pool_size=10, max_overflow=20, pool_recycle=1800)
    _engine = create_async_engine(url, **options)
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _session_factory


async def create_tables() -> None:
    """Create any missing tables on the initialised engine."""
    if _engine is None:
        raise RuntimeError("call init_session_factory() before create_tables()")
    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose the async engine, closing all pooled connections."""
    global _engine  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None


def set_session_factory(factory: async_sessionmaker[AsyncSession] | None) -> None:
    """Override session factory (for testing)."""
    global _session_factory  # noqa: PLW0603
    _session_factory = factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a per-request session with automatic commit/rollback."""
    if _session_factory is None:
        raise RuntimeError("call init_session_factory() before handling requests")
    async with _session_factory() as session:
        async with session.begin():
            yield session


# ---------------------------------------------------------------------------
# Getters (for Depends())
# ---------------------------------------------------------------------------


def get_store_service() -> StoreService:
    return _store_service


def get_legacy_gateway() -> LegacyStoreManagerGateway:
    return _legacy_gateway
