"""
Módulo centralizado para gerenciamento de cache da aplicação.

O ``CacheStore`` guarda payloads já serializados; quem grava é responsável
por codificar e decodificar o próprio payload (ver ``get_or_compute``).
As entradas não expiram: vivem até serem invalidadas explicitamente.
"""
import logging
import math
import threading
from typing import Annotated, Any, Awaitable, Callable, Iterable, TypeVar, Union

from cachetools import Cache
from fastapi import Depends, Request
from pydantic import TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Payload = Union[bytes, str]

# Chaves conhecidas por quem lê ou invalida o cache
LATEST_PRODUCTS_KEY = "latestProducts"
CATEGORIES_KEY = "categories"
ADMIN_PRODUCTS_KEY = "admin-products"
ADMIN_STATS_KEY = "admin-stats"


def product_cache_key(product_id: Any) -> str:
    return f"product-{product_id}"


class CacheMiss(KeyError):
    """Nenhuma entrada para a chave pedida."""


class CacheStore:
    def __init__(self):
        # maxsize infinito: nenhuma entrada é descartada por tamanho
        self._entries: Cache = Cache(maxsize=math.inf)
        self._lock = threading.RLock()

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> Payload:
        with self._lock:
            try:
                return self._entries[key]
            except KeyError:
                raise CacheMiss(key) from None

    def set(self, key: str, value: Payload) -> None:
        with self._lock:
            self._entries[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)
        logger.debug(f"Entrada de cache removida: {key}")

    def delete_many(self, keys: Iterable[str]) -> None:
        keys = set(keys)
        with self._lock:
            for key in keys:
                self._entries.pop(key, None)
        logger.debug(f"Entradas de cache removidas: {sorted(keys)}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Cache da aplicação limpo")

    def stats(self) -> dict:
        """
        Retorna estatísticas sobre o cache.
        Útil para monitoramento e debugging.
        """
        with self._lock:
            return {
                "current_size": len(self._entries),
                "keys": sorted(self._entries.keys()),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


async def get_or_compute(
    cache: CacheStore,
    key: str,
    compute: Callable[[], Awaitable[Any]],
    adapter: TypeAdapter[T],
) -> T:
    """
    Leitura com cache: devolve o valor decodificado se a chave existir,
    senão calcula, grava e devolve.

    Um payload que não decodifica é tratado como ausente e sobrescrito.
    Se ``compute`` falhar nada é gravado.
    """
    try:
        return adapter.validate_json(cache.get(key))
    except CacheMiss:
        logger.debug(f"Cache miss para a chave {key}")
    except ValidationError:
        logger.warning(f"Payload inválido no cache para a chave {key}, recalculando")
        cache.delete(key)

    value = adapter.validate_python(await compute(), from_attributes=True)
    cache.set(key, adapter.dump_json(value))
    return value


def get_cache(request: Request) -> CacheStore:
    return request.app.state.cache


AppCache = Annotated[CacheStore, Depends(get_cache)]
