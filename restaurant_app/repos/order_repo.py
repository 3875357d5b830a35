# restaurant_app/repos/order_repo.py
from decimal import Decimal
from typing import List
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from restaurant_app.data.models.order import OrderModel, ORDER_PAID, ORDER_PENDING
from restaurant_app.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order_with_items(self, order: OrderModel, items: List[OrderItemModel]) -> OrderModel:
        """
        Zamowienie i pozycje w jednej transakcji.
        Nie commituje - o commit/rollback decyduje serwis.
        """
        self.db.add(order)
        self.db.flush()

        for item in items:
            item.order_id = order.id
            self.db.add(item)
        self.db.flush()
        return order

    def get_order(self, order_id: UUID) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_by_invoice_ref(self, invoice_ref: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(OrderModel.external_invoice_ref == invoice_ref)
        ).scalar_one_or_none()

    def list_orders(self, status: str | None = None) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .order_by(OrderModel.created_at.desc())
        )
        if status:
            stmt = stmt.where(OrderModel.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def count(self, status: str | None = None) -> int:
        stmt = select(func.count(OrderModel.id))
        if status:
            stmt = stmt.where(OrderModel.status == status)
        return self.db.execute(stmt).scalar_one()

    def count_pending(self) -> int:
        return self.count(ORDER_PENDING)

    def paid_revenue(self) -> Decimal:
        total = self.db.execute(
            select(func.coalesce(func.sum(OrderModel.total_amount), 0))
            .where(OrderModel.status == ORDER_PAID)
        ).scalar_one()
        return Decimal(str(total))

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
