# restaurant_app/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from restaurant_app.data.database import get_db
from restaurant_app.domain.schemas import ProductOut
from restaurant_app.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    """Dostepne produkty, alfabetycznie."""
    return CatalogService(db).list_available()
