from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from helpers import (
    ENV,
    FakeIdentityClient,
    FakeNotifier,
    FakePaymentClient,
    FakeVisionClient,
)
from restaurant_app.data.database import Base, make_engine, make_session_factory
from restaurant_app.data.models import OrderModel, ProductModel
from restaurant_app.main import create_app
from restaurant_app.utils.settings import Settings


@pytest.fixture
def settings():
    return Settings(dict(ENV))


@pytest.fixture
def engine():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def payment_client():
    return FakePaymentClient()


@pytest.fixture
def identity_client():
    return FakeIdentityClient()


@pytest.fixture
def vision_client():
    return FakeVisionClient()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def app(settings, session_factory, payment_client, identity_client, vision_client, notifier):
    return create_app(
        settings,
        session_factory=session_factory,
        payment_client=payment_client,
        identity_client=identity_client,
        vision_client=vision_client,
        notifier=notifier,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def product(db):
    p = ProductModel(name="Nasi Goreng", description="Fried rice", price=Decimal("100000"), image_url="https://img.test/ng.jpg")
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


@pytest.fixture
def order_count(session_factory):
    def _count():
        with session_factory() as s:
            return s.execute(select(func.count(OrderModel.id))).scalar_one()
    return _count


