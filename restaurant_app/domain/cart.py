# restaurant_app/domain/cart.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List

ZERO = Decimal("0.00")


@dataclass
class CartLine:
    product_id: Any
    name: str
    price: Decimal
    quantity: int = 1

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class Cart:
    """
    Koszyk po stronie klienta, trzymany tylko w pamieci.
    Wszystkie operacje sa totalne - brak bledow, zly input jest normalizowany.
    """

    def __init__(self):
        self._lines: Dict[Any, CartLine] = {}

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    def add_item(self, item: CartLine, qty: int = 1) -> None:
        existing = self._lines.get(item.product_id)
        if existing:
            # ten sam produkt - zwiekszamy ilosc zamiast nowej linii
            existing.quantity += qty
            if existing.quantity <= 0:
                self.remove_item(item.product_id)
            return

        if qty <= 0:
            return

        self._lines[item.product_id] = CartLine(
            product_id=item.product_id,
            name=item.name,
            price=Decimal(str(item.price)),
            quantity=qty,
        )

    def set_quantity(self, product_id: Any, qty: int) -> None:
        if qty <= 0:
            self.remove_item(product_id)
            return

        line = self._lines.get(product_id)
        if line:
            line.quantity = qty

    def remove_item(self, product_id: Any) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def total(self) -> Decimal:
        return sum((line.line_total for line in self._lines.values()), ZERO)

    def tax(self, rate: Decimal) -> Decimal:
        return (self.total() * rate).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def grand_total(self, rate: Decimal) -> Decimal:
        return self.total() + self.tax(rate)

    def __len__(self) -> int:
        return len(self._lines)
