# restaurant_app/data/models/order.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Numeric, Text, Uuid
from sqlalchemy.orm import relationship

from restaurant_app.data.database import Base

ORDER_PENDING = "pending"
ORDER_PAID = "paid"
ORDER_FAILED = "failed"
ORDER_EXPIRED = "expired"

TERMINAL_STATUSES = (ORDER_PAID, ORDER_FAILED, ORDER_EXPIRED)


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=True)

    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(16), nullable=False, default=ORDER_PENDING)  # pending, paid, failed, expired

    external_invoice_ref = Column(String(255), nullable=True, unique=True)
    invoice_url = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
