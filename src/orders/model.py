from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from pydantic import ConfigDict, Field
from src.schemas.base import CamelModel
from src.entities.order import OrderStatus


class OrderItem(CamelModel):
    product_id: UUID
    name: str
    price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)


class ShippingInfo(CamelModel):
    address: str
    city: str
    state: str
    country: str
    pin_code: str


class NewOrderRequest(ShippingInfo):
    model_config = ConfigDict(extra="forbid")

    user_id: str
    order_items: List[OrderItem] = Field(min_length=1)
    subtotal: Decimal = Field(ge=0)
    tax: Decimal = Field(default=Decimal(0), ge=0)
    shipping_charges: Decimal = Field(default=Decimal(0), ge=0)
    discount: Decimal = Field(default=Decimal(0), ge=0)
    total: Decimal = Field(ge=0)


class OrderResponse(ShippingInfo):
    id: UUID
    user_id: str
    order_items: List[OrderItem]
    subtotal: Decimal
    tax: Decimal
    shipping_charges: Decimal
    discount: Decimal
    total: Optional[Decimal] = None
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
