# restaurant_app/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict, Iterable

from restaurant_app.domain.cart import Cart, CartLine


class CartService:
    """Wycena koszyka klienta: suma, podatek, do zaplaty."""

    def __init__(self, tax_rate: Decimal):
        self.tax_rate = tax_rate

    def quote(self, lines: Iterable[Any]) -> Dict[str, Any]:
        cart = Cart()
        for line in lines:
            cart.add_item(
                CartLine(product_id=line.product_id, name=line.name, price=line.price),
                qty=line.quantity,
            )

        return {
            "items": [
                {
                    "product_id": i.product_id,
                    "name": i.name,
                    "price": i.price,
                    "quantity": i.quantity,
                    "line_total": i.line_total,
                }
                for i in cart.lines
            ],
            "subtotal": cart.total(),
            "tax": cart.tax(self.tax_rate),
            "total": cart.grand_total(self.tax_rate),
        }
