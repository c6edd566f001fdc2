from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional
from uuid import UUID
from pydantic import ConfigDict, Field, field_validator
from src.schemas.base import CamelModel


class ProductBase(CamelModel):
    name: str = Field(min_length=3, max_length=150)
    category: str = Field(min_length=2, max_length=50)
    price: Decimal = Field(ge=0, decimal_places=2)
    stock: int = Field(ge=0)
    image: Optional[str] = None

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: str) -> str:
        return v.strip().lower()


class ProductCreate(ProductBase):
    # Campos fora do schema são rejeitados
    model_config = ConfigDict(extra="forbid")


class ProductUpdate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=3, max_length=150)
    category: Optional[str] = Field(default=None, min_length=2, max_length=50)
    price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    stock: Optional[int] = Field(default=None, ge=0)
    image: Optional[str] = None

    @field_validator("name", "category", "price", "stock")
    @classmethod
    def reject_null(cls, v):
        # Omitir o campo mantém o valor atual; null não é aceito
        if v is None:
            raise ValueError("o campo não pode ser nulo")
        return v

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v is not None else v


class ProductResponse(ProductBase):
    id: UUID
    created_at: datetime
    updated_at: datetime


class ProductSearchParams(CamelModel):
    search: Optional[str] = None
    price: Optional[Decimal] = None
    category: Optional[str] = None
    sort: Optional[Literal["asc", "desc"]] = None
    page: int = Field(default=1, ge=1)
