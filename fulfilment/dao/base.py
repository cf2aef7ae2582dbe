"""Generic base DAO — async CRUD over a single ORM model."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fulfilment.core.database import Base

ModelT = TypeVar("ModelT", bound=Base)

# Columns owned by the database; never written through update().
_IMMUTABLE = frozenset({"id", "created_at", "updated_at"})

# Primary keys are BIGINT; anything outside this range cannot name a row.
PK_MIN = -(2**63)
PK_MAX = 2**63 - 1


class BaseDAO(Generic[ModelT]):
    """Base data-access object. Subclasses set ``model`` class attribute."""

    model: type[ModelT]

    @staticmethod
    def _require_pk(pk: int) -> None:
        """Raise ValueError if *pk* is None."""
        if pk is None:
            raise ValueError("pk must not be None")

    @staticmethod
    def _storable(pk: int) -> bool:
        return PK_MIN <= pk <= PK_MAX

    def _check_columns(self, values: dict[str, Any]) -> None:
        column_keys = set(self.model.__mapper__.column_attrs.keys())
        for key in values:
            if key in _IMMUTABLE:
                raise AttributeError(f"'{key}' is immutable and cannot be updated")
            if key not in column_keys:
                raise AttributeError(f"{self.model.__name__} has no column '{key}'")

    async def get_by_id(self, session: AsyncSession, pk: int) -> ModelT | None:
        self._require_pk(pk)
        if not self._storable(pk):
            return None
        return await session.get(self.model, pk)

    async def list_all(self, session: AsyncSession, *order_by: Any) -> list[ModelT]:
        """Return every row, ordered by *order_by* columns when given."""
        stmt = select(self.model)
        if order_by:
            stmt = stmt.order_by(*order_by)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, session: AsyncSession, **values: Any) -> ModelT:
        self._check_columns(values)
        obj = self.model(**values)
        session.add(obj)
        await session.flush()
        await session.refresh(obj)
        return obj

    async def update(self, session: AsyncSession, pk: int, **values: Any) -> ModelT | None:
        """Set *values* on the row with primary key *pk*.

        Returns the refreshed object, or None if no such row exists.
        Raises ``AttributeError`` for immutable or unknown columns.
        """
        self._require_pk(pk)
        self._check_columns(values)
        if not self._storable(pk):
            return None
        obj = await session.get(self.model, pk)
        if obj is None:
            return None
        for key, val in values.items():
            setattr(obj, key, val)
        await session.flush()
        await session.refresh(obj)
        return obj

    async def delete(self, session: AsyncSession, pk: int) -> ModelT | None:
        """Delete the row and return the removed object, or None if absent."""
        self._require_pk(pk)
        if not self._storable(pk):
            return None
        obj = await session.get(self.model, pk)
        if obj is None:
            return None
        await session.delete(obj)
        await session.flush()
        return obj

    async def get_by_field(self, session: AsyncSession, **filters: Any) -> ModelT | None:
        """Return the first row matching all *filters*, or None.

        Usage::

            store = await dao.get_by_field(session, name="KALLAX")

        Raises ``ValueError`` if called without any filters.
        """
        if not filters:
            raise ValueError("get_by_field() requires at least one filter")
        stmt = select(self.model)
        for key, val in filters.items():
            stmt = stmt.where(getattr(self.model, key) == val)
        result = await session.execute(stmt)
        return result.scalars().first()
