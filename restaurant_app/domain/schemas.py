# restaurant_app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from decimal import Decimal
from datetime import datetime
from uuid import UUID


class CamelModel(BaseModel):
    """Schematy API storefrontu uzywaja camelCase."""

    model_config = ConfigDict(populate_by_name=True)


class ProductOut(BaseModel):
    """Schema dla produktu z katalogu (response)."""

    id: UUID
    name: str
    description: str | None = None
    price: Decimal
    image_url: str
    is_available: bool
    needs_review: bool = False
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ProductAvailabilityIn(BaseModel):
    is_available: bool


class ProductIntakeIn(BaseModel):
    """Zdjecie jako data URL (data:image/...;base64,...) lub zwykly URL."""

    image: str = Field(..., min_length=1)
    image_name: str | None = Field(default=None, alias="imageName")

    model_config = ConfigDict(populate_by_name=True)


class ProductIntakeOut(BaseModel):
    success: bool = True
    product: ProductOut
    message: str


class CartLineIn(CamelModel):
    product_id: UUID = Field(..., alias="productId")
    name: str = ""
    price: Decimal
    quantity: int = 1


class CartQuoteIn(CamelModel):
    items: List[CartLineIn]


class CartLineOut(CamelModel):
    product_id: UUID = Field(..., serialization_alias="productId")
    name: str
    price: Decimal
    quantity: int
    line_total: Decimal = Field(..., serialization_alias="lineTotal")


class CartQuoteOut(CamelModel):
    items: List[CartLineOut]
    subtotal: Decimal
    tax: Decimal
    total: Decimal


class CheckoutItemIn(CamelModel):
    """Pozycja zamowienia wyslana przez storefront."""

    product_id: UUID = Field(..., alias="productId")
    name: str | None = None
    price: Decimal | None = None
    quantity: int


class CheckoutIn(CamelModel):
    customer_name: str = Field(..., alias="customerName")
    email: Optional[str] = None
    items: List[CheckoutItemIn]
    total_amount: Decimal = Field(..., alias="totalAmount")
    description: Optional[str] = None


class CheckoutOut(CamelModel):
    order_id: UUID = Field(..., serialization_alias="orderId")
    invoice_url: str = Field(..., serialization_alias="invoiceUrl")


class OrderItemOut(BaseModel):
    id: UUID
    product_id: UUID
    quantity: int
    price_at_order_time: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamowienia (response, panel admina)."""

    id: UUID
    customer_name: str
    customer_email: str | None = None
    total_amount: Decimal
    status: str
    external_invoice_ref: str | None = None
    created_at: datetime
    updated_at: datetime
    paid_at: datetime | None = None
    items: List[OrderItemOut] = []

    model_config = ConfigDict(from_attributes=True)


class WebhookAck(CamelModel):
    success: bool = True
    order_id: UUID = Field(..., serialization_alias="orderId")
    status: str
    changed: bool


class UserRoleOut(BaseModel):
    id: UUID
    external_user_id: str
    role: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InviteIn(BaseModel):
    email: str = Field(..., min_length=1)


class InviteOut(CamelModel):
    success: bool = True
    invitation_id: str = Field(..., serialization_alias="invitationId")


class DashboardOut(CamelModel):
    total_products: int = Field(..., serialization_alias="totalProducts")
    total_orders: int = Field(..., serialization_alias="totalOrders")
    pending_orders: int = Field(..., serialization_alias="pendingOrders")
    total_revenue: Decimal = Field(..., serialization_alias="totalRevenue")
