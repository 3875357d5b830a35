# restaurant_app/services/role_service.py
from dataclasses import dataclass
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from restaurant_app.data.models.user_role import (
    UserRoleModel,
    ROLE_ADMIN,
    ROLE_NONE,
    ROLE_SUPERADMIN,
)
from restaurant_app.domain.errors import CapacityError, PersistenceError, ProviderError
from restaurant_app.repos.role_repo import RoleRepo
from restaurant_app.services.identity_client import IdentityClient
from restaurant_app.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RoleAssignment:
    external_user_id: str
    role: str
    created: bool
    metadata_synced: bool


class RoleService:
    """
    Role adminow przypisane do zewnetrznych tozsamosci.
    - pierwszy wpis w systemie: superadmin
    - kolejni: admin, max `max_admins` (superadmin sie nie liczy)
    """

    def __init__(self, db: Session, max_admins: int = 5, identity_client: IdentityClient | None = None):
        self.repo = RoleRepo(db)
        self.max_admins = max_admins
        self.identity_client = identity_client

    def role_for(self, external_user_id: str) -> str:
        try:
            row = self.repo.get_role(external_user_id)
        except SQLAlchemyError as e:
            logger.error(f"Role lookup for {external_user_id} failed: {e}")
            raise PersistenceError("Role lookup failed") from e
        return row.role if row else ROLE_NONE

    def list_roles(self) -> List[UserRoleModel]:
        return self.repo.list_roles()

    def assign_role(self, external_user_id: str) -> RoleAssignment:
        try:
            existing = self.repo.get_role(external_user_id)
            if existing:
                # ponowna dostawa user.created - rola bez zmian, metadane wysylane ponownie
                logger.info(f"User {external_user_id} already has role {existing.role}")
                return RoleAssignment(
                    external_user_id,
                    existing.role,
                    created=False,
                    metadata_synced=self._mirror(external_user_id, existing.role),
                )

            if self.repo.count_all() == 0:
                role = ROLE_SUPERADMIN
            else:
                admin_count = self.repo.count_admins()
                if admin_count >= self.max_admins:
                    logger.info(
                        f"Maximum admin limit ({self.max_admins}) reached. "
                        f"User {external_user_id} denied admin access."
                    )
                    raise CapacityError(
                        f"Only {self.max_admins} admin accounts are allowed "
                        f"(superadmin does not count toward limit)"
                    )
                role = ROLE_ADMIN

            self.repo.create_role(UserRoleModel(external_user_id=external_user_id, role=role))
        except IntegrityError as e:
            self.repo.rollback()
            logger.error(f"Role insert for {external_user_id} conflicted: {e}")
            raise PersistenceError("Role assignment conflicted, retry delivery") from e
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error inserting user role for {external_user_id}: {e}")
            raise PersistenceError("Failed to store user role") from e

        logger.info(f"User {external_user_id} assigned role: {role}")

        return RoleAssignment(
            external_user_id,
            role,
            created=True,
            metadata_synced=self._mirror(external_user_id, role),
        )

    def _mirror(self, external_user_id: str, role: str) -> bool:
        if self.identity_client is None:
            return False
        try:
            self.identity_client.set_role_metadata(external_user_id, role)
        except ProviderError as e:
            # wpis lokalny zostaje - to tylko kopia w metadanych dostawcy
            logger.error(f"Role metadata mirroring for {external_user_id} failed: {e}")
            return False
        return True
