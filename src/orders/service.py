from typing import List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from logging import getLogger

from . import model
from src.database.repository import ConditionalUpdateError, Repository
from src.entities.order import Order
from src.entities.product import Product
from src.entities.user import User
from src.exceptions.orders import OrderNotFoundError
from src.exceptions.products import InsufficientStockError, ProductNotFoundError
from src.exceptions.users import UserNotFoundError
from src.utils.invalidation import CacheInvalidator, EntityKind, InvalidationRequest

logger = getLogger(__name__)


async def create_order(
    session_factory: async_sessionmaker[AsyncSession],
    invalidator: CacheInvalidator,
    new_order: model.NewOrderRequest,
) -> Order:
    if not await Repository(User, session_factory).find_by_id(new_order.user_id):
        raise UserNotFoundError(new_order.user_id)

    products = Repository(Product, session_factory)
    quantities = {}
    names = {}
    for item in new_order.order_items:
        product = await products.find_by_id(item.product_id)
        if not product:
            raise ProductNotFoundError(item.product_id)
        quantities[product.id] = quantities.get(product.id, 0) + item.quantity
        names[product.id] = product.name

    # Pedido e baixa de estoque na mesma transação; a baixa exige saldo no banco
    try:
        order = await Repository(Order, session_factory).create_with_decrements(
            dict(
                **new_order.model_dump(exclude={"order_items"}),
                order_items=[item.model_dump(mode="json") for item in new_order.order_items],
            ),
            Product.stock,
            quantities,
        )
    except ConditionalUpdateError as e:
        logger.warning(f"Estoque insuficiente para o produto de ID {e.entity_id}")
        raise InsufficientStockError(names[e.entity_id])

    invalidator.invalidate(InvalidationRequest(EntityKind.ORDER, order.id))
    # Stock changed, so every product view touched by the order is stale too
    for product_id in quantities:
        invalidator.invalidate(InvalidationRequest(EntityKind.PRODUCT, product_id))

    logger.info(f"Novo pedido {order.id} registrado para o usuário {order.user_id}")
    return order


async def get_orders(session_factory: async_sessionmaker[AsyncSession]) -> List[Order]:
    return await Repository(Order, session_factory).find(
        order_by=[Order.created_at.desc()]
    )


async def get_user_orders(
    session_factory: async_sessionmaker[AsyncSession], user_id: str
) -> List[Order]:
    return await Repository(Order, session_factory).find(
        Order.user_id == user_id, order_by=[Order.created_at.desc()]
    )


async def get_order_by_id(
    session_factory: async_sessionmaker[AsyncSession], order_id: UUID
) -> Order:
    order = await Repository(Order, session_factory).find_by_id(order_id)
    if not order:
        logger.warning(f"Pedido de ID {order_id} não encontrado")
        raise OrderNotFoundError(order_id)
    return order


async def process_order(
    session_factory: async_sessionmaker[AsyncSession],
    invalidator: CacheInvalidator,
    order_id: UUID,
) -> Order:
    """Avança o status do pedido: processing -> shipped -> delivered."""
    order = await get_order_by_id(session_factory, order_id)
    order = await Repository(Order, session_factory).update_by_id(
        order_id, {"status": order.status.next_status}
    )
    if not order:
        raise OrderNotFoundError(order_id)

    invalidator.invalidate(InvalidationRequest(EntityKind.ORDER, order_id))
    logger.info(f"Pedido {order_id} atualizado para {order.status.value}")
    return order


async def delete_order(
    session_factory: async_sessionmaker[AsyncSession],
    invalidator: CacheInvalidator,
    order_id: UUID,
) -> None:
    deleted_order = await Repository(Order, session_factory).delete_by_id(order_id)
    if not deleted_order:
        logger.warning(f"Pedido de ID {order_id} não encontrado para exclusão")
        raise OrderNotFoundError(order_id)

    invalidator.invalidate(InvalidationRequest(EntityKind.ORDER, order_id))
    logger.info(f"Pedido de ID {order_id} foi excluído")
