# restaurant_app/api/deps.py
from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from restaurant_app.data.database import get_db
from restaurant_app.data.models.user_role import ROLE_ADMIN, ROLE_SUPERADMIN
from restaurant_app.domain.errors import AuthenticationError, ForbiddenError
from restaurant_app.services.role_service import RoleService

bearer = HTTPBearer(auto_error=False)


@dataclass
class AdminIdentity:
    user_id: str
    role: str


def get_role_service(request: Request, db: Session = Depends(get_db)) -> RoleService:
    state = request.app.state
    return RoleService(
        db,
        max_admins=state.settings.max_admins,
        identity_client=state.identity_client,
    )


def get_current_user_id(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> str:
    if credentials is None:
        raise AuthenticationError("Missing bearer token")

    settings = request.app.state.settings
    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.identity_jwt_key,
            algorithms=[settings.identity_jwt_algorithm],
            options={"verify_aud": False},
        )
    except JWTError as e:
        raise AuthenticationError("Invalid token") from e

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Token has no subject")
    return user_id


def require_role(*roles: str):
    def dependency(
        user_id: str = Depends(get_current_user_id),
        roles_svc: RoleService = Depends(get_role_service),
    ) -> AdminIdentity:
        role = roles_svc.role_for(user_id)
        if role not in roles:
            raise ForbiddenError(f"Role {role} cannot perform this operation")
        return AdminIdentity(user_id=user_id, role=role)

    return dependency


require_admin = require_role(ROLE_ADMIN, ROLE_SUPERADMIN)
require_superadmin = require_role(ROLE_SUPERADMIN)
