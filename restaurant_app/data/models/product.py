# restaurant_app/data/models/product.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, Numeric, Boolean, DateTime, Uuid

from restaurant_app.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(Text, nullable=False)

    is_available = Column(Boolean, nullable=False, default=True)
    # cena oszacowana przez AI z niska pewnoscia, do recznej weryfikacji
    needs_review = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
