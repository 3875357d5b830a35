# restaurant_app/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker

from restaurant_app.api import include_routers
from restaurant_app.data.database import Base, make_engine, make_session_factory
from restaurant_app.services.dedupe_guard import DedupeGuard
from restaurant_app.services.identity_client import IdentityClient
from restaurant_app.services.invoice_client import PaymentClient
from restaurant_app.services.notification_service import NotificationService
from restaurant_app.services.vision_client import VisionClient
from restaurant_app.utils.logging import configure_logging, get_logger
from restaurant_app.utils.settings import Settings

# import wszystkich modeli przed create_all
import restaurant_app.data.models  # noqa: F401

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    session_factory: sessionmaker | None = None,
    payment_client=None,
    identity_client=None,
    vision_client=None,
    notifier=None,
) -> FastAPI:
    """
    Klienci budowani raz przy starcie i trzymani w app.state.
    Testy podstawiaja wlasne (fake) implementacje.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    engine = None
    owned_notifier = None
    if session_factory is None:
        engine = make_engine(settings.database_url)
        session_factory = make_session_factory(engine)

    bind = session_factory.kw.get("bind")
    logger.info(f"Initializing database tables: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=bind)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if engine is not None:
            logger.info("Disposing database connection pool")
            engine.dispose()
        if owned_notifier is not None:
            logger.info("Closing dedupe guard connection")
            owned_notifier.close()

    app = FastAPI(title="Restaurant Ordering Service", version="1.0.0", lifespan=lifespan)

    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.payment_client = payment_client or PaymentClient(
        secret_key=settings.payment_secret_key,
        base_url=settings.payment_api_url,
        public_base_url=settings.public_base_url,
        currency=settings.payment_currency,
        timeout=settings.http_timeout,
    )
    app.state.identity_client = identity_client or IdentityClient(
        secret_key=settings.identity_secret_key,
        base_url=settings.identity_api_url,
        timeout=settings.http_timeout,
    )
    app.state.vision_client = vision_client or VisionClient(
        api_key=settings.vision_api_key,
        base_url=settings.vision_api_url,
        model=settings.vision_model,
        currency=settings.payment_currency,
        timeout=max(settings.http_timeout, 30),
    )
    if notifier is None:
        notifier = owned_notifier = NotificationService(DedupeGuard(settings.redis_url))
    app.state.notifier = notifier

    include_routers(app)
    return app


if __name__ == "__main__":
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
