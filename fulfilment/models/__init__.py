"""SQLAlchemy ORM models — one file per table."""

from fulfilment.models.store import Store

__all__ = ["Store"]
