from sqlalchemy import Column, String, DateTime, DECIMAL, Enum, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import UUID
import uuid
from datetime import datetime, timezone
from ..database.core import Base
import enum


class OrderStatus(enum.Enum):
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"

    @property
    def next_status(self) -> "OrderStatus":
        if self == OrderStatus.PROCESSING:
            return OrderStatus.SHIPPED
        return OrderStatus.DELIVERED


class Order(Base):
    __tablename__ = "orders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)

    # Endereço de entrega
    address = Column(String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    country = Column(String, nullable=False)
    pin_code = Column(String, nullable=False)

    # [{"product_id": ..., "name": ..., "price": ..., "quantity": ...}]
    order_items = Column(JSON, nullable=False, default=list)

    subtotal = Column(DECIMAL(12, 2), nullable=False, default=0)
    tax = Column(DECIMAL(12, 2), nullable=False, default=0)
    shipping_charges = Column(DECIMAL(12, 2), nullable=False, default=0)
    discount = Column(DECIMAL(12, 2), nullable=False, default=0)
    # Legacy orders may lack a total; revenue treats them as zero
    total = Column(DECIMAL(12, 2), nullable=True)

    status = Column(
        Enum(OrderStatus, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=OrderStatus.PROCESSING,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return f"<Order(user_id='{self.user_id}', total='{self.total}', status='{self.status}')>"
