from decimal import Decimal

import pytest
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from restaurant_app.data.models import OrderItemModel, OrderModel, ProductModel


@pytest.fixture
def order(db, product):
    o = OrderModel(customer_name="Budi", total_amount=Decimal("220000"), status="pending")
    o.items.append(OrderItemModel(product_id=product.id, quantity=2, price_at_order_time=Decimal("100000")))
    db.add(o)
    db.commit()
    return o


def item_count(db):
    return db.execute(select(func.count(OrderItemModel.id))).scalar_one()


def test_product_with_order_items_cannot_be_deleted(db, product, order):
    db.delete(product)

    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()

    assert db.get(ProductModel, product.id) is not None
    assert item_count(db) == 1


def test_deleting_order_removes_its_items(db, order):
    db.delete(order)
    db.commit()

    assert item_count(db) == 0


def test_database_cascade_removes_items_without_orm(db, order):
    db.execute(delete(OrderModel).where(OrderModel.id == order.id))
    db.commit()

    assert item_count(db) == 0


def test_item_quantity_must_be_positive(db, product, order):
    db.add(OrderItemModel(order_id=order.id, product_id=product.id, quantity=0, price_at_order_time=Decimal("1")))

    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()
