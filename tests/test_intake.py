from decimal import Decimal

import pytest

from helpers import auth_headers, grant_role
from restaurant_app.domain.errors import ValidationError
from restaurant_app.services.intake_service import ProductIntakeService, name_hint, parse_image_name

IMAGE = "data:image/jpeg;base64,/9j/4AAQSkZJRg=="


@pytest.mark.parametrize(
    "image_name, expected",
    [
        ("nasi_goreng 25000.jpg", ("Nasi Goreng", Decimal("25000"))),
        ("es-teh manis 5000.png", ("Es Teh Manis", Decimal("5000"))),
        ("bakso 99.jpg", (None, None)),
        ("sate.jpg", (None, None)),
        (None, (None, None)),
    ],
)
def test_parse_image_name(image_name, expected):
    assert parse_image_name(image_name) == expected


def test_name_hint_strips_extension():
    assert name_hint("mie_ayam.jpeg") == "Mie Ayam"


def test_filename_price_skips_estimation(db, vision_client):
    svc = ProductIntakeService(db, vision_client)

    result = svc.intake(IMAGE, "nasi_goreng 25000.jpg")

    assert result.product.name == "Nasi Goreng"
    assert result.product.price == Decimal("25000")
    assert result.product.description == "Tasty Nasi Goreng"
    assert result.product.needs_review is False
    assert vision_client.analyzed == []


def test_estimated_price_is_used(db, vision_client):
    result = ProductIntakeService(db, vision_client).intake(IMAGE, "fried_rice.jpg")

    assert vision_client.analyzed == ["Fried Rice"]
    assert result.product.price == Decimal("25000")
    assert result.product.needs_review is False
    assert result.product.image_url == IMAGE


def test_uncertain_price_is_flagged_for_review(db, vision_client):
    vision_client.result = {"name": "Mystery Dish", "description": "", "estimated_price": Decimal("0")}

    result = ProductIntakeService(db, vision_client).intake(IMAGE)

    assert result.product.needs_review is True
    assert "verify the price manually" in result.message


def test_intake_requires_image(db, vision_client):
    with pytest.raises(ValidationError):
        ProductIntakeService(db, vision_client).intake("")


def test_intake_endpoint(client, db):
    grant_role(db, "user_admin", "admin")

    resp = client.post(
        "/admin/products/intake",
        json={"image": IMAGE, "imageName": "sate ayam 30000.jpg"},
        headers=auth_headers("user_admin"),
    )

    assert resp.status_code == 201
    data = resp.json()
    assert data["success"] is True
    assert data["product"]["name"] == "Sate Ayam"
    assert [p["name"] for p in client.get("/products").json()] == ["Sate Ayam"]
