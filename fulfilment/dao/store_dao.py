"""StoreDAO — stores table operations."""

from sqlalchemy.ext.asyncio import AsyncSession

from fulfilment.dao.base import BaseDAO
from fulfilment.models.store import Store


class StoreDAO(BaseDAO[Store]):
    model = Store

    async def list_sorted_by_name(self, session: AsyncSession) -> list[Store]:
        """All stores, name ascending (id breaks ties)."""
        return await self.list_all(session, Store.name, Store.id)

    async def get_by_name(self, session: AsyncSession, name: str) -> Store | None:
        return await self.get_by_field(session, name=name)
