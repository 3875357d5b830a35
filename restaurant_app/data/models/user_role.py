import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Uuid

from restaurant_app.data.database import Base

ROLE_SUPERADMIN = "superadmin"
ROLE_ADMIN = "admin"
ROLE_NONE = "none"


class UserRoleModel(Base):
    __tablename__ = "user_roles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    external_user_id = Column(String(255), nullable=False, unique=True)
    role = Column(String(16), nullable=False)  # superadmin, admin
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
