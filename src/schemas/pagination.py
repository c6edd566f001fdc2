import math
from typing import Generic, TypeVar, List, Optional
from .base import CamelModel

T = TypeVar("T")


class PaginatedResponse(CamelModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    size: int
    pages: int
    previous_page: Optional[int] = None
    next_page: Optional[int] = None

    @classmethod
    def create(cls, items: List[T], total: int, page: int, size: int):
        pages = math.ceil(total / size) if size > 0 else 0
        return cls(
            items=items,
            total=total,
            page=page,
            size=size,
            pages=pages,
            previous_page=page - 1 if page > 1 else None,
            next_page=page + 1 if page + 1 <= pages else None,
        )
