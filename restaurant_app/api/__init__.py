# restaurant_app/api/__init__.py
from fastapi import FastAPI

from restaurant_app.api.errors import register_error_handlers
from restaurant_app.api.routers import admin, cart, health, orders, products, webhooks


def include_routers(app: FastAPI) -> None:
    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(cart.router)
    app.include_router(orders.router)
    app.include_router(webhooks.router)
    app.include_router(admin.router)
