# restaurant_app/api/routers/cart.py
from fastapi import APIRouter, Request

from restaurant_app.domain.schemas import CartQuoteIn, CartQuoteOut
from restaurant_app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.post("/quote", response_model=CartQuoteOut)
def quote_cart(payload: CartQuoteIn, request: Request):
    svc = CartService(tax_rate=request.app.state.settings.tax_rate)
    return svc.quote(payload.items)
