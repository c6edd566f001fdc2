from fastapi import APIRouter, Query, status
from typing import Annotated, List
from uuid import UUID

from ..database.core import SessionFactory
from ..auth.service import CurrentAdmin
from ..utils.invalidation import Invalidator
from . import model
from . import service

router = APIRouter(prefix="/api/v1/order", tags=["Orders"])


@router.post(
    "/new", response_model=model.OrderResponse, status_code=status.HTTP_201_CREATED
)
async def create_order(
    session_factory: SessionFactory,
    invalidator: Invalidator,
    new_order: model.NewOrderRequest,
):
    return await service.create_order(session_factory, invalidator, new_order)


@router.get("/my", response_model=List[model.OrderResponse])
async def get_my_orders(session_factory: SessionFactory, id: Annotated[str, Query()]):
    return await service.get_user_orders(session_factory, id)


@router.get("/all", response_model=List[model.OrderResponse])
async def get_orders(session_factory: SessionFactory, current_admin: CurrentAdmin):
    return await service.get_orders(session_factory)


@router.get("/{order_id}", response_model=model.OrderResponse)
async def get_order(session_factory: SessionFactory, order_id: UUID):
    return await service.get_order_by_id(session_factory, order_id)


@router.put("/{order_id}", response_model=model.OrderResponse)
async def process_order(
    session_factory: SessionFactory,
    invalidator: Invalidator,
    order_id: UUID,
    current_admin: CurrentAdmin,
):
    return await service.process_order(session_factory, invalidator, order_id)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    session_factory: SessionFactory,
    invalidator: Invalidator,
    order_id: UUID,
    current_admin: CurrentAdmin,
):
    await service.delete_order(session_factory, invalidator, order_id)
