# restaurant_app/repos/product_repo.py
from typing import List
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from restaurant_app.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: UUID) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_products(self, product_ids: List[UUID]) -> List[ProductModel]:
        if not product_ids:
            return []
        return list(
            self.db.execute(
                select(ProductModel).where(ProductModel.id.in_(product_ids))
            ).scalars().all()
        )

    def list_available(self) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .where(ProductModel.is_available.is_(True))
                .order_by(ProductModel.name.asc())
            ).scalars().all()
        )

    def list_all(self) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel).order_by(ProductModel.created_at.desc())
            ).scalars().all()
        )

    def count(self) -> int:
        return self.db.execute(select(func.count(ProductModel.id))).scalar_one()

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
