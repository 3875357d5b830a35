# restaurant_app/services/intake_service.py
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from restaurant_app.data.models.product import ProductModel
from restaurant_app.domain.errors import PersistenceError, ValidationError
from restaurant_app.repos.product_repo import ProductRepo
from restaurant_app.services.vision_client import VisionClient
from restaurant_app.utils.logging import get_logger

logger = get_logger(__name__)

# "nasi goreng 25000.jpg" -> ("Nasi Goreng", 25000)
_NAME_PRICE = re.compile(r"^(.*?)\s+(\d{3,})$")
_EXTENSION = re.compile(r"\.[^/.]+$")


def _title(text: str) -> str:
    cleaned = re.sub(r"[_-]", " ", text)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), cleaned).strip()


def parse_image_name(image_name: str | None) -> Tuple[str | None, Decimal | None]:
    """Nazwa i cena z nazwy pliku, jesli ma format '<nazwa> <cena>'."""
    if not image_name:
        return None, None

    match = _NAME_PRICE.match(_EXTENSION.sub("", image_name))
    if not match:
        return None, None

    name = _title(match.group(1))
    if not name:
        return None, None
    return name, Decimal(match.group(2))


def name_hint(image_name: str | None) -> str | None:
    if not image_name:
        return None
    return _title(_EXTENSION.sub("", image_name)) or None


@dataclass
class IntakeResult:
    product: ProductModel
    message: str


class ProductIntakeService:
    """
    Dodawanie produktu ze zdjecia.
    Wynik modelu nie ma gwarancji poprawnosci - niepewna cena = needs_review.
    """

    def __init__(self, db: Session, vision_client: VisionClient):
        self.repo = ProductRepo(db)
        self.vision_client = vision_client

    def intake(self, image: str, image_name: str | None = None) -> IntakeResult:
        if not image:
            raise ValidationError("Image is required")

        name, price = parse_image_name(image_name)

        if name and price is not None:
            description = self.vision_client.describe(image, name)
            needs_review = False
            message = f"Name and price extracted from filename: {name} at {price}."
        else:
            result = self.vision_client.analyze(image, name_hint(image_name))
            name = result["name"]
            description = result["description"]
            price = result["estimated_price"]
            needs_review = price <= 0
            if needs_review:
                price = Decimal("0")
                message = "Price was uncertain, please verify the price manually."
            else:
                message = f"Estimated price: {price}. Please verify this matches current market prices."

        try:
            product = self.repo.create_product(
                ProductModel(
                    name=name,
                    description=description,
                    price=price,
                    image_url=image,
                    is_available=True,
                    needs_review=needs_review,
                )
            )
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error inserting product {name}: {e}")
            raise PersistenceError("Failed to add product to database") from e

        logger.info(f"Product {product.id} created from image (needs_review={needs_review})")
        return IntakeResult(product=product, message=f"Product created successfully. {message}")
