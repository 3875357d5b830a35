from sqlalchemy import Column, Integer, ForeignKey, Numeric, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
import uuid

from restaurant_app.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False)
    # snapshot ceny z momentu checkoutu, nigdy nie przeliczany z products.price
    price_at_order_time = Column(Numeric(10, 2), nullable=False)

    order = relationship("OrderModel", back_populates="items")
    product = relationship("ProductModel")

    __table_args__ = (CheckConstraint("quantity > 0", name="ck_order_item_quantity_positive"),)
