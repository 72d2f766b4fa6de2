# novara/api/__init__.py
from fastapi import FastAPI

from novara.api.routers import admin, auth, cart, catalog, checkout, health, orders
from novara.utils.settings import STORE_NAME


def create_app() -> FastAPI:
    app = FastAPI(title=f"{STORE_NAME} Storefront", version="1.0.0")

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(catalog.router)
    app.include_router(cart.router)
    app.include_router(checkout.router)
    app.include_router(orders.router)
    app.include_router(admin.router)

    return app
