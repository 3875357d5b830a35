# restaurant_app/services/catalog_service.py
from typing import List
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from restaurant_app.data.models.product import ProductModel
from restaurant_app.domain.errors import NotFoundError, PersistenceError
from restaurant_app.repos.product_repo import ProductRepo
from restaurant_app.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def list_available(self) -> List[ProductModel]:
        try:
            return self.repo.list_available()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch products: {e}")
            raise PersistenceError("Failed to fetch products") from e

    def list_all(self) -> List[ProductModel]:
        try:
            return self.repo.list_all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch products: {e}")
            raise PersistenceError("Failed to fetch products") from e

    def set_availability(self, product_id: UUID, is_available: bool) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        product.is_available = is_available
        try:
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to update product {product_id}: {e}")
            raise PersistenceError("Failed to update product") from e

        logger.info(f"Product {product_id} availability set to {is_available}")
        return product
