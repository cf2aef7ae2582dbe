"""Store request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fulfilment.models.store import NAME_MAX_LENGTH


class StoreRequest(BaseModel):
    """Inbound store payload for create, update and patch.

    ``id`` and ``name`` are optional here on purpose: the router rejects a
    supplied id or a missing name with its own messages.
    """

    id: int | None = None
    name: str | None = Field(None, max_length=NAME_MAX_LENGTH)
    quantity_products_in_stock: int = Field(0, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def _blank_name_is_unset(cls, v: str | None) -> str | None:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class StoreResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    quantity_products_in_stock: int
    created_at: datetime
    updated_at: datetime
