# restaurant_app/api/routers/admin.py
import re
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from restaurant_app.api.deps import (
    AdminIdentity,
    get_role_service,
    require_admin,
    require_superadmin,
)
from restaurant_app.data.database import get_db
from restaurant_app.domain.errors import ProviderError, ValidationError
from restaurant_app.domain.schemas import (
    DashboardOut,
    InviteIn,
    InviteOut,
    OrderOut,
    ProductAvailabilityIn,
    ProductIntakeIn,
    ProductIntakeOut,
    ProductOut,
    UserRoleOut,
)
from restaurant_app.services.catalog_service import CatalogService
from restaurant_app.services.intake_service import ProductIntakeService
from restaurant_app.services.order_service import OrderService
from restaurant_app.services.role_service import RoleService
from restaurant_app.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(db: Session = Depends(get_db), admin: AdminIdentity = Depends(require_admin)):
    return OrderService(db).dashboard()


@router.get("/orders", response_model=List[OrderOut])
def list_orders(
    status: str | None = Query(default=None),
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(require_admin),
):
    return OrderService(db).list_orders(status)


@router.get("/products", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db), admin: AdminIdentity = Depends(require_admin)):
    return CatalogService(db).list_all()


@router.patch("/products/{product_id}", response_model=ProductOut)
def set_product_availability(
    product_id: UUID,
    payload: ProductAvailabilityIn,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(require_admin),
):
    return CatalogService(db).set_availability(product_id, payload.is_available)


@router.post("/products/intake", response_model=ProductIntakeOut, status_code=201)
def intake_product(
    payload: ProductIntakeIn,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(require_admin),
):
    """Nowy produkt ze zdjecia: nazwa/opis/cena z modelu wizyjnego."""
    svc = ProductIntakeService(db, vision_client=request.app.state.vision_client)
    result = svc.intake(payload.image, payload.image_name)
    return ProductIntakeOut(
        product=ProductOut.model_validate(result.product),
        message=result.message,
    )


@router.get("/users", response_model=List[UserRoleOut])
def list_users(
    roles_svc: RoleService = Depends(get_role_service),
    admin: AdminIdentity = Depends(require_superadmin),
):
    return roles_svc.list_roles()


@router.post("/invite", response_model=InviteOut)
def invite_admin(
    payload: InviteIn,
    request: Request,
    admin: AdminIdentity = Depends(require_superadmin),
):
    email = payload.email.strip()
    if not _EMAIL.match(email):
        raise ValidationError("Invalid email format")

    state = request.app.state
    if state.identity_client is None:
        raise ProviderError("Identity provider not configured")

    invitation_id = state.identity_client.create_invitation(
        email=email,
        redirect_url=f"{state.settings.public_base_url}/admin",
        role="admin",
    )
    logger.info(f"User {admin.user_id} invited {email} as admin ({invitation_id})")
    return InviteOut(invitation_id=invitation_id)
