from fastapi import APIRouter, Query, status
from typing import Annotated, List
from uuid import UUID

from ..database.core import SessionFactory
from ..auth.service import CurrentAdmin
from ..schemas.pagination import PaginatedResponse
from ..utils.cache import AppCache
from ..utils.invalidation import Invalidator
from . import model
from . import service

router = APIRouter(prefix="/api/v1/product", tags=["Products"])


@router.post(
    "/new", response_model=model.ProductResponse, status_code=status.HTTP_201_CREATED
)
async def create_product(
    session_factory: SessionFactory,
    invalidator: Invalidator,
    product: model.ProductCreate,
    current_admin: CurrentAdmin,
):
    return await service.create_product(session_factory, invalidator, product)


@router.get("/latest", response_model=List[model.ProductResponse])
async def get_latest_products(session_factory: SessionFactory, cache: AppCache):
    return await service.get_latest_products(session_factory, cache)


@router.get("/categories", response_model=List[str])
async def get_categories(session_factory: SessionFactory, cache: AppCache):
    return await service.get_categories(session_factory, cache)


@router.get("/admin-products", response_model=List[model.ProductResponse])
async def get_admin_products(
    session_factory: SessionFactory, cache: AppCache, current_admin: CurrentAdmin
):
    return await service.get_admin_products(session_factory, cache)


@router.get("/all", response_model=PaginatedResponse[model.ProductResponse])
async def search_products(
    session_factory: SessionFactory,
    params: Annotated[model.ProductSearchParams, Query()],
):
    return await service.search_products(session_factory, params)


@router.get("/{product_id}", response_model=model.ProductResponse)
async def get_product(session_factory: SessionFactory, cache: AppCache, product_id: UUID):
    return await service.get_product_by_id(session_factory, cache, product_id)


@router.put("/{product_id}", response_model=model.ProductResponse)
async def update_product(
    session_factory: SessionFactory,
    invalidator: Invalidator,
    product_id: UUID,
    product_update: model.ProductUpdate,
    current_admin: CurrentAdmin,
):
    return await service.update_product(
        session_factory, invalidator, product_id, product_update
    )


@router.delete("/{product_id}", response_model=model.ProductResponse)
async def delete_product(
    session_factory: SessionFactory,
    invalidator: Invalidator,
    product_id: UUID,
    current_admin: CurrentAdmin,
):
    return await service.delete_product(session_factory, invalidator, product_id)
