# restaurant_app/api/routers/orders.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from restaurant_app.data.database import get_db
from restaurant_app.domain.schemas import CheckoutIn, CheckoutOut
from restaurant_app.services.order_service import OrderService

router = APIRouter(tags=["orders"])


def get_service(request: Request, db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db, payment_client=request.app.state.payment_client)


@router.post("/checkout", response_model=CheckoutOut, status_code=201)
def checkout(payload: CheckoutIn, svc: OrderService = Depends(get_service)):
    """
    Tworzy zamowienie pending i fakture u operatora platnosci.
    Zwraca URL strony platnosci.
    """
    result = svc.place_order(
        customer_name=payload.customer_name,
        email=payload.email,
        line_items=payload.items,
        total_amount=payload.total_amount,
        description=payload.description,
    )
    return CheckoutOut(order_id=result.order.id, invoice_url=result.invoice_url)
