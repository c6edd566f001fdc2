"""
Mapeamento entre "o que mudou" e "quais chaves de cache ficaram velhas".

Toda escrita de produto, usuário ou pedido chama ``CacheInvalidator.invalidate``
depois que a escrita foi confirmada no banco.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Annotated, Any, Optional

from fastapi import Depends

from src.exceptions.cache import InvalidInvalidationRequestError
from src.utils.cache import (
    ADMIN_PRODUCTS_KEY,
    ADMIN_STATS_KEY,
    CATEGORIES_KEY,
    LATEST_PRODUCTS_KEY,
    AppCache,
    CacheStore,
    product_cache_key,
)

logger = logging.getLogger(__name__)


class EntityKind(enum.Enum):
    PRODUCT = "product"
    USER = "user"
    ORDER = "order"


@dataclass(frozen=True)
class InvalidationRequest:
    entity_kind: EntityKind
    entity_id: Optional[Any] = None


# Views derived from the whole collection, purged on any write of that kind
INVALIDATION_POLICY: dict[EntityKind, frozenset[str]] = {
    EntityKind.PRODUCT: frozenset(
        {LATEST_PRODUCTS_KEY, CATEGORIES_KEY, ADMIN_PRODUCTS_KEY, ADMIN_STATS_KEY}
    ),
    EntityKind.ORDER: frozenset({ADMIN_STATS_KEY}),
    EntityKind.USER: frozenset({ADMIN_STATS_KEY}),
}


class CacheInvalidator:
    def __init__(self, cache: CacheStore):
        self.cache = cache

    def keys_for(self, request: InvalidationRequest) -> set[str]:
        try:
            kind = EntityKind(request.entity_kind)
        except ValueError:
            raise InvalidInvalidationRequestError(request.entity_kind) from None

        keys = set(INVALIDATION_POLICY[kind])
        # Only products have a per-id cache entry
        if kind is EntityKind.PRODUCT and request.entity_id is not None:
            keys.add(product_cache_key(request.entity_id))
        return keys

    def invalidate(self, request: InvalidationRequest) -> None:
        keys = self.keys_for(request)
        self.cache.delete_many(keys)
        logger.info(
            f"Cache invalidado para {request.entity_kind} "
            f"(ID {request.entity_id}): {sorted(keys)}"
        )


def get_invalidator(cache: AppCache) -> CacheInvalidator:
    return CacheInvalidator(cache)


Invalidator = Annotated[CacheInvalidator, Depends(get_invalidator)]
