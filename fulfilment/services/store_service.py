"""StoreService — store CRUD on top of StoreDAO."""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from fulfilment.dao.store_dao import StoreDAO
from fulfilment.models.store import Store
from fulfilment.services import ConflictError

log = structlog.get_logger(__name__)


class StoreService:
    """Stateless service for store CRUD.

    Lookups by id return ``None`` when the store does not exist; translating
    that into an HTTP error is left to the caller.
    """

    def __init__(self, store_dao: StoreDAO) -> None:
        self._store_dao = store_dao

    async def list(self, session: AsyncSession) -> list[Store]:
        """Return all stores ordered by name."""
        return await self._store_dao.list_sorted_by_name(session)

    async def get(self, session: AsyncSession, store_id: int) -> Store | None:
        return await self._store_dao.get_by_id(session, store_id)

    async def create(
        self,
        session: AsyncSession,
        *,
        name: str,
        quantity_products_in_stock: int = 0,
    ) -> Store:
        """Persist a new store. The database assigns its id.

        Raises :class:`ConflictError` if another store already has *name*.
        """
        await self._ensure_name_available(session, name)
        store = await self._store_dao.create(
            session,
            name=name,
            quantity_products_in_stock=quantity_products_in_stock,
        )
        log.info("store.created", store_id=store.id, name=store.name)
        return store

    async def update(
        self,
        session: AsyncSession,
        store_id: int,
        *,
        name: str,
        quantity_products_in_stock: int = 0,
    ) -> Store | None:
        """Replace every mutable field of the store.

        Fields not supplied fall back to their defaults. Returns None if the
        store does not exist.
        """
        return await self._apply(
            session,
            store_id,
            {"name": name, "quantity_products_in_stock": quantity_products_in_stock},
            event="store.updated",
        )

    async def patch(self, session: AsyncSession, store_id: int, **values: Any) -> Store | None:
        """Change only the given fields. Returns None if the store does not exist."""
        return await self._apply(session, store_id, values, event="store.patched")

    async def delete(self, session: AsyncSession, store_id: int) -> Store | None:
        """Remove the store and return it, or None if it does not exist."""
        store = await self._store_dao.delete(session, store_id)
        if store is not None:
            log.info("store.deleted", store_id=store_id)
        return store

    async def _apply(
        self,
        session: AsyncSession,
        store_id: int,
        values: dict[str, Any],
        *,
        event: str,
    ) -> Store | None:
        store = await self._store_dao.get_by_id(session, store_id)
        if store is None:
            return None
        if "name" in values:
            await self._ensure_name_available(session, values["name"], exclude_id=store_id)
        store = await self._store_dao.update(session, store_id, **values)
        log.info(event, store_id=store_id, fields=sorted(values))
        return store

    async def _ensure_name_available(
        self,
        session: AsyncSession,
        name: str,
        exclude_id: int | None = None,
    ) -> None:
        existing = await self._store_dao.get_by_name(session, name)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(f"Store with name '{name}' already exists.")
