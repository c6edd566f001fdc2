import asyncio
from typing import List
from uuid import UUID
from pydantic import TypeAdapter
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import logging

from . import model
from src.config import settings
from src.database.repository import Repository
from src.entities.product import Product
from src.exceptions.products import (
    ProductCreationError,
    ProductNotFoundError,
    ProductUpdateError,
)
from src.schemas.pagination import PaginatedResponse
from src.utils.cache import (
    ADMIN_PRODUCTS_KEY,
    CATEGORIES_KEY,
    LATEST_PRODUCTS_KEY,
    CacheStore,
    get_or_compute,
    product_cache_key,
)
from src.utils.invalidation import CacheInvalidator, EntityKind, InvalidationRequest

product_list_adapter = TypeAdapter(List[model.ProductResponse])
product_adapter = TypeAdapter(model.ProductResponse)
category_list_adapter = TypeAdapter(List[str])


def _products(session_factory: async_sessionmaker[AsyncSession]) -> Repository[Product]:
    return Repository(Product, session_factory)


async def create_product(
    session_factory: async_sessionmaker[AsyncSession],
    invalidator: CacheInvalidator,
    product: model.ProductCreate,
) -> Product:
    try:
        new_product = await _products(session_factory).create(**product.model_dump())
    except IntegrityError as e:
        logging.error(f"Falha na criação do produto: {product.name}")
        raise ProductCreationError(str(e.orig))

    invalidator.invalidate(InvalidationRequest(EntityKind.PRODUCT))
    logging.info(f"Novo produto registrado: {new_product.name}")
    return new_product


async def get_latest_products(
    session_factory: async_sessionmaker[AsyncSession], cache: CacheStore
) -> List[model.ProductResponse]:
    async def compute():
        return await _products(session_factory).find(
            order_by=[Product.created_at.desc()],
            limit=settings.LATEST_PRODUCTS_LIMIT,
        )

    return await get_or_compute(cache, LATEST_PRODUCTS_KEY, compute, product_list_adapter)


async def get_categories(
    session_factory: async_sessionmaker[AsyncSession], cache: CacheStore
) -> List[str]:
    async def compute():
        return await _products(session_factory).distinct(Product.category)

    return await get_or_compute(cache, CATEGORIES_KEY, compute, category_list_adapter)


async def get_admin_products(
    session_factory: async_sessionmaker[AsyncSession], cache: CacheStore
) -> List[model.ProductResponse]:
    async def compute():
        return await _products(session_factory).find(order_by=[Product.created_at.desc()])

    return await get_or_compute(cache, ADMIN_PRODUCTS_KEY, compute, product_list_adapter)


async def get_product_by_id(
    session_factory: async_sessionmaker[AsyncSession],
    cache: CacheStore,
    product_id: UUID,
) -> model.ProductResponse:
    async def compute():
        product = await _products(session_factory).find_by_id(product_id)
        # Raising here keeps a missing product out of the cache
        if not product:
            logging.warning(f"Produto de ID {product_id} não encontrado")
            raise ProductNotFoundError(product_id)
        return product

    return await get_or_compute(
        cache, product_cache_key(product_id), compute, product_adapter
    )


async def update_product(
    session_factory: async_sessionmaker[AsyncSession],
    invalidator: CacheInvalidator,
    product_id: UUID,
    product_update: model.ProductUpdate,
) -> Product:
    product_data = product_update.model_dump(exclude_unset=True)
    try:
        updated_product = await _products(session_factory).update_by_id(
            product_id, product_data
        )
    except IntegrityError as e:
        logging.error(f"Falha na atualização do produto de ID {product_id}")
        raise ProductUpdateError(str(e.orig))
    if not updated_product:
        logging.warning(f"Produto de ID {product_id} não encontrado para atualização")
        raise ProductNotFoundError(product_id)

    invalidator.invalidate(InvalidationRequest(EntityKind.PRODUCT, product_id))
    logging.info(f"Produto de ID {product_id} atualizado com sucesso")
    return updated_product


async def delete_product(
    session_factory: async_sessionmaker[AsyncSession],
    invalidator: CacheInvalidator,
    product_id: UUID,
) -> Product:
    deleted_product = await _products(session_factory).delete_by_id(product_id)
    if not deleted_product:
        logging.warning(f"Produto de ID {product_id} não encontrado para exclusão")
        raise ProductNotFoundError(product_id)

    invalidator.invalidate(InvalidationRequest(EntityKind.PRODUCT, product_id))
    logging.info(f"Produto de ID {product_id} foi excluído")
    return deleted_product


async def search_products(
    session_factory: async_sessionmaker[AsyncSession],
    params: model.ProductSearchParams,
) -> PaginatedResponse[model.ProductResponse]:
    """
    Listagem pública com busca por nome, teto de preço, categoria e
    ordenação por preço. Não passa pelo cache.
    """
    filters = []
    if params.search:
        filters.append(Product.name.icontains(params.search, autoescape=True))
    if params.price is not None:
        filters.append(Product.price <= params.price)
    if params.category:
        filters.append(Product.category == params.category.strip().lower())

    order_by = [Product.created_at.desc()]
    if params.sort:
        order_by = [Product.price.asc() if params.sort == "asc" else Product.price.desc()]

    limit = settings.PRODUCTS_LIMIT
    products = _products(session_factory)
    items, total = await asyncio.gather(
        products.find(
            *filters, order_by=order_by, limit=limit, skip=(params.page - 1) * limit
        ),
        products.count(*filters),
    )
    return PaginatedResponse[model.ProductResponse].create(
        items=product_list_adapter.validate_python(items, from_attributes=True),
        total=total,
        page=params.page,
        size=limit,
    )
