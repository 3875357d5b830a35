from decimal import Decimal
from uuid import UUID, uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from helpers import load_order, signed_payment
from restaurant_app.data.models import OrderItemModel
from restaurant_app.domain.errors import PersistenceError, ValidationError
from restaurant_app.domain.schemas import CheckoutItemIn
from restaurant_app.repos.order_repo import OrderRepo
from restaurant_app.services.order_service import OrderService


def checkout_body(product, **overrides):
    body = {
        "customerName": "Budi",
        "email": "budi@example.com",
        "items": [{"productId": str(product.id), "name": product.name, "price": 100000, "quantity": 1}],
        "totalAmount": 110000,
    }
    body.update(overrides)
    return body


def test_checkout_creates_pending_order_and_invoice(client, product, payment_client, session_factory):
    resp = client.post("/checkout", json=checkout_body(product))

    assert resp.status_code == 201
    data = resp.json()
    assert data["invoiceUrl"] == "https://checkout.test/inv-1"

    order = load_order(session_factory, UUID(data["orderId"]))
    assert order.status == "pending"
    assert order.total_amount == Decimal("110000")
    assert order.external_invoice_ref == "inv-1"
    assert order.paid_at is None

    with session_factory() as s:
        items = s.execute(select(OrderItemModel).where(OrderItemModel.order_id == order.id)).scalars().all()
    assert len(items) == 1
    assert items[0].product_id == product.id
    assert items[0].quantity == 1
    assert items[0].price_at_order_time == Decimal("100000")

    assert payment_client.calls[0]["amount"] == Decimal("110000")
    assert payment_client.calls[0]["payer_email"] == "budi@example.com"


def test_checkout_then_paid_webhook_marks_order_paid(client, product, session_factory):
    resp = client.post("/checkout", json=checkout_body(product))
    order_id = resp.json()["orderId"]

    body, headers = signed_payment({"status": "PAID", "external_id": order_id})
    ack = client.post("/webhooks/payment", content=body, headers=headers)

    assert ack.status_code == 200
    assert ack.json()["success"] is True
    assert load_order(session_factory, UUID(order_id)).status == "paid"


def test_price_snapshot_survives_catalog_price_change(client, product, db, session_factory):
    resp = client.post("/checkout", json=checkout_body(product))
    order_id = UUID(resp.json()["orderId"])

    product.price = Decimal("150000")
    db.commit()

    with session_factory() as s:
        item = s.execute(select(OrderItemModel).where(OrderItemModel.order_id == order_id)).scalar_one()
    assert item.price_at_order_time == Decimal("100000")


@pytest.mark.parametrize(
    "overrides",
    [
        {"customerName": "   "},
        {"items": []},
        {"totalAmount": 0},
        {"totalAmount": -5},
        {"totalAmount": 0.4},
    ],
)
def test_checkout_validation_has_no_side_effects(client, product, payment_client, order_count, overrides):
    resp = client.post("/checkout", json=checkout_body(product, **overrides))

    assert resp.status_code == 400
    assert resp.json()["error"] == "validation_error"
    assert order_count() == 0
    assert payment_client.calls == []


def test_checkout_rejects_zero_quantity(client, product, order_count):
    body = checkout_body(product)
    body["items"][0]["quantity"] = 0

    resp = client.post("/checkout", json=body)

    assert resp.status_code == 400
    assert order_count() == 0


def test_checkout_rejects_unknown_product(client, product, order_count):
    body = checkout_body(product)
    body["items"][0]["productId"] = str(uuid4())

    resp = client.post("/checkout", json=body)

    assert resp.status_code == 400
    assert order_count() == 0


def test_checkout_rejects_unavailable_product(client, product, db, order_count):
    product.is_available = False
    db.commit()

    resp = client.post("/checkout", json=checkout_body(product))

    assert resp.status_code == 400
    assert order_count() == 0


def test_failed_item_insert_leaves_no_orphan_order(client, product, payment_client, order_count, monkeypatch):
    def broken_insert(self, order, items):
        self.db.add(order)
        self.db.flush()
        raise SQLAlchemyError("order_items insert failed")

    monkeypatch.setattr(OrderRepo, "add_order_with_items", broken_insert)
    before = order_count()

    resp = client.post("/checkout", json=checkout_body(product))

    assert resp.status_code == 500
    assert resp.json()["error"] == "persistence_error"
    assert order_count() == before
    assert payment_client.calls == []


def test_provider_failure_leaves_retryable_pending_order(client, product, payment_client, session_factory, order_count):
    payment_client.fail = True

    resp = client.post("/checkout", json=checkout_body(product))

    assert resp.status_code == 502
    assert resp.json()["error"] == "provider_error"
    assert order_count() == 1

    order_id = payment_client.calls[0]["order_id"]
    order = load_order(session_factory, order_id)
    assert order.status == "pending"
    assert order.external_invoice_ref is None

    payment_client.fail = False
    retry = client.post("/checkout", json=checkout_body(product))
    assert retry.status_code == 201


def test_duplicate_lines_are_merged(db, product, payment_client):
    svc = OrderService(db, payment_client=payment_client)
    lines = [
        CheckoutItemIn(product_id=product.id, price=Decimal("100000"), quantity=1),
        CheckoutItemIn(product_id=product.id, price=Decimal("100000"), quantity=2),
    ]

    result = svc.place_order("Siti", None, lines, Decimal("330000"))

    items = db.execute(
        select(OrderItemModel).where(OrderItemModel.order_id == result.order.id)
    ).scalars().all()
    assert [i.quantity for i in items] == [3]


def test_place_order_validates_before_touching_database(db, payment_client):
    svc = OrderService(db, payment_client=payment_client)

    with pytest.raises(ValidationError):
        svc.place_order("", None, [], Decimal("10"))


def test_list_orders_rejects_unknown_status(db):
    with pytest.raises(ValidationError):
        OrderService(db).list_orders("shipped")


def test_list_orders_wraps_database_errors(db, monkeypatch):
    def broken(self, status=None):
        raise SQLAlchemyError("db down")

    monkeypatch.setattr(OrderRepo, "list_orders", broken)

    with pytest.raises(PersistenceError):
        OrderService(db).list_orders()


def test_total_rounding_to_zero_invoice_amount_is_rejected(db, product, payment_client):
    svc = OrderService(db, payment_client=payment_client)
    lines = [CheckoutItemIn(product_id=product.id, quantity=1)]

    with pytest.raises(ValidationError):
        svc.place_order("Siti", None, lines, Decimal("0.49"))

    assert payment_client.calls == []
