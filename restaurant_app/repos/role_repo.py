from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from restaurant_app.data.models.user_role import UserRoleModel, ROLE_ADMIN


class RoleRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_role(self, external_user_id: str) -> UserRoleModel | None:
        return self.db.execute(
            select(UserRoleModel).where(UserRoleModel.external_user_id == external_user_id)
        ).scalar_one_or_none()

    def count_all(self) -> int:
        return self.db.execute(select(func.count(UserRoleModel.id))).scalar_one()

    def count_admins(self) -> int:
        return self.db.execute(
            select(func.count(UserRoleModel.id)).where(UserRoleModel.role == ROLE_ADMIN)
        ).scalar_one()

    def list_roles(self) -> List[UserRoleModel]:
        return list(
            self.db.execute(
                select(UserRoleModel).order_by(UserRoleModel.created_at.asc())
            ).scalars().all()
        )

    def create_role(self, role: UserRoleModel) -> UserRoleModel:
        self.db.add(role)
        self.db.commit()
        self.db.refresh(role)
        return role

    def rollback(self):
        self.db.rollback()
