"""Stores router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from fulfilment.api.deps import get_legacy_gateway, get_session, get_store_service
from fulfilment.api.schemas.store import StoreRequest, StoreResponse
from fulfilment.legacy.gateway import LegacyStoreManagerGateway
from fulfilment.services import NotFoundError, ValidationError
from fulfilment.services.store_service import StoreService

router = APIRouter()


def _not_found(store_id: int) -> NotFoundError:
    return NotFoundError(f"Store with id of {store_id} does not exist.")


def _require_name(body: StoreRequest) -> str:
    if body.name is None:
        raise ValidationError("Store Name was not set on request.")
    return body.name


@router.get("", response_model=list[StoreResponse])
async def list_stores(
    session: AsyncSession = Depends(get_session),
    svc: StoreService = Depends(get_store_service),
) -> list[StoreResponse]:
    stores = await svc.list(session)
    return [StoreResponse.model_validate(store) for store in stores]


@router.get("/{store_id}", response_model=StoreResponse)
async def get_store(
    store_id: int,
    session: AsyncSession = Depends(get_session),
    svc: StoreService = Depends(get_store_service),
) -> StoreResponse:
    store = await svc.get(session, store_id)
    if store is None:
        raise _not_found(store_id)
    return StoreResponse.model_validate(store)


@router.post("", response_model=StoreResponse, status_code=201)
async def create_store(
    body: StoreRequest,
    session: AsyncSession = Depends(get_session),
    svc: StoreService = Depends(get_store_service),
    legacy: LegacyStoreManagerGateway = Depends(get_legacy_gateway),
) -> StoreResponse:
    if body.id is not None:
        raise ValidationError("Id was invalidly set on request.")
    name = _require_name(body)

    store = await svc.create(
        session,
        name=name,
        quantity_products_in_stock=body.quantity_products_in_stock,
    )
    created = StoreResponse.model_validate(store)
    await legacy.create_store_on_legacy_system(created.model_dump(mode="json"))
    return created


@router.put("/{store_id}", response_model=StoreResponse)
async def update_store(
    store_id: int,
    body: StoreRequest,
    session: AsyncSession = Depends(get_session),
    svc: StoreService = Depends(get_store_service),
    legacy: LegacyStoreManagerGateway = Depends(get_legacy_gateway),
) -> StoreResponse:
    name = _require_name(body)

    store = await svc.update(
        session,
        store_id,
        name=name,
        quantity_products_in_stock=body.quantity_products_in_stock,
    )
    if store is None:
        raise _not_found(store_id)
    updated = StoreResponse.model_validate(store)
    await legacy.update_store_on_legacy_system(updated.model_dump(mode="json"))
    return updated


@router.patch("/{store_id}", response_model=StoreResponse)
async def patch_store(
    store_id: int,
    body: StoreRequest,
    session: AsyncSession = Depends(get_session),
    svc: StoreService = Depends(get_store_service),
    legacy: LegacyStoreManagerGateway = Depends(get_legacy_gateway),
) -> StoreResponse:
    _require_name(body)

    changes = body.model_dump(exclude_unset=True, exclude={"id"})
    store = await svc.patch(session, store_id, **changes)
    if store is None:
        raise _not_found(store_id)
    # Legacy sync gets the request payload here, not the persisted row (unlike PUT).
    await legacy.update_store_on_legacy_system(body.model_dump(mode="json"))
    return StoreResponse.model_validate(store)


@router.delete("/{store_id}", status_code=204)
async def delete_store(
    store_id: int,
    session: AsyncSession = Depends(get_session),
    svc: StoreService = Depends(get_store_service),
) -> Response:
    store = await svc.delete(session, store_id)
    if store is None:
        raise _not_found(store_id)
    return Response(status_code=204)
