# restaurant_app/services/order_service.py
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from restaurant_app.data.models.order import OrderModel, ORDER_PENDING, TERMINAL_STATUSES
from restaurant_app.data.models.order_item import OrderItemModel
from restaurant_app.domain.errors import (
    NotFoundError,
    PersistenceError,
    ProviderError,
    ValidationError,
)
from restaurant_app.repos.order_repo import OrderRepo
from restaurant_app.repos.product_repo import ProductRepo
from restaurant_app.services.invoice_client import PaymentClient, to_minor_units
from restaurant_app.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_STATUSES = (ORDER_PENDING,) + TERMINAL_STATUSES


@dataclass
class CheckoutResult:
    order: OrderModel
    invoice_url: str


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Checkout: walidacja -> zamowienie + pozycje (jedna transakcja) -> faktura.
    """

    def __init__(self, db: Session, payment_client: PaymentClient | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.payment_client = payment_client

    def _validate(self, customer_name: str, line_items: List[Any], total_amount: Any) -> Decimal:
        if not (customer_name or "").strip():
            raise ValidationError("Customer name is required")

        if not line_items:
            raise ValidationError("Order must contain at least one item")

        try:
            total = Decimal(str(total_amount))
        except InvalidOperation:
            raise ValidationError("Total amount must be a number")

        if not total.is_finite() or total <= 0:
            raise ValidationError("Total amount must be greater than 0")

        if to_minor_units(total) <= 0:
            raise ValidationError("Total amount rounds to 0 on the invoice")

        for item in line_items:
            if item.quantity is None or item.quantity <= 0:
                raise ValidationError(f"Quantity for product {item.product_id} must be greater than 0")

        return total

    def _build_items(self, line_items: Iterable[Any]) -> List[OrderItemModel]:
        # ten sam produkt w kilku liniach -> jedna pozycja
        quantities: Dict[UUID, int] = {}
        client_prices: Dict[UUID, Any] = {}
        for item in line_items:
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity
            client_prices[item.product_id] = getattr(item, "price", None)

        try:
            products = {p.id: p for p in self.products.get_products(list(quantities))}
        except SQLAlchemyError as e:
            logger.error(f"Failed to load products for checkout: {e}")
            raise PersistenceError("Failed to load products") from e

        items = []
        for product_id, quantity in quantities.items():
            product = products.get(product_id)
            if not product:
                raise ValidationError(f"Product {product_id} does not exist")
            if not product.is_available:
                raise ValidationError(f"Product {product.name} is not available")

            sent = client_prices.get(product_id)
            if sent is not None and Decimal(str(sent)) != product.price:
                logger.warning(
                    f"Client price {sent} for product {product_id} differs from catalog price {product.price}"
                )

            # snapshot ceny z katalogu w chwili checkoutu
            items.append(
                OrderItemModel(
                    product_id=product_id,
                    quantity=quantity,
                    price_at_order_time=product.price,
                )
            )
        return items

    def place_order(
        self,
        customer_name: str,
        email: str | None,
        line_items: List[Any],
        total_amount: Any,
        description: str | None = None,
    ) -> CheckoutResult:
        """
        Use Case: Checkout goscia.

        1. Walidacja (bez efektow ubocznych)
        2. Zamowienie pending + pozycje w jednej transakcji
        3. Faktura u operatora platnosci
        4. Zapis referencji faktury na zamowieniu
        """
        total = self._validate(customer_name, line_items, total_amount)
        items = self._build_items(line_items)

        order = OrderModel(
            customer_name=customer_name.strip(),
            customer_email=email or None,
            total_amount=total,
            status=ORDER_PENDING,
        )

        try:
            self.repo.add_order_with_items(order, items)
            self.repo.commit()
        except SQLAlchemyError as e:
            # rollback calej transakcji - zadnych osieroconych zamowien pending
            self.repo.rollback()
            logger.error(f"Failed to create order for {customer_name}: {e}")
            raise PersistenceError("Failed to create order") from e

        logger.info(f"Order {order.id} created with {len(items)} items, total {total}")

        if self.payment_client is None:
            raise ProviderError("Payment provider not configured")

        try:
            invoice = self.payment_client.create_invoice(
                order_id=order.id,
                amount=total,
                payer_email=email,
                description=description,
            )
        except ProviderError:
            # zamowienie zostaje pending bez faktury, klient moze ponowic checkout
            logger.error(f"Invoice creation failed, order {order.id} left pending")
            raise

        order.external_invoice_ref = invoice.invoice_id
        order.invoice_url = invoice.redirect_url
        try:
            self.repo.commit()
        except SQLAlchemyError as e:
            # webhook i tak znajdzie zamowienie po order_<id>
            self.repo.rollback()
            logger.error(f"Failed to save invoice {invoice.invoice_id} on order {order.id}: {e}")

        logger.info(f"Invoice {invoice.invoice_id} issued for order {order.id}")
        return CheckoutResult(order=order, invoice_url=invoice.redirect_url)

    def get_order(self, order_id: UUID) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def list_orders(self, status: str | None = None) -> List[OrderModel]:
        if status and status not in ORDER_STATUSES:
            raise ValidationError(f"Unknown order status: {status}")
        try:
            return self.repo.list_orders(status)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch orders: {e}")
            raise PersistenceError("Failed to fetch orders") from e

    def dashboard(self) -> Dict[str, Any]:
        try:
            return {
                "total_products": self.products.count(),
                "total_orders": self.repo.count(),
                "pending_orders": self.repo.count_pending(),
                "total_revenue": self.repo.paid_revenue(),
            }
        except SQLAlchemyError as e:
            logger.error(f"Failed to compute dashboard stats: {e}")
            raise PersistenceError("Failed to compute dashboard stats") from e
