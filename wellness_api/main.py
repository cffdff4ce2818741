"""FastAPI application entry point for the wellness content API."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from wellness_api.api.errors import register_exception_handlers
from wellness_api.api.router import api_router
from wellness_api.core.config import Settings
from wellness_api.core.db import Database
from wellness_api.core.logging import setup_logging
from wellness_api.domains.payments.fulfillment import FulfillmentRegistry, default_fulfillment
from wellness_api.infrastructure.payments import PaymentGateway, build_payment_gateway
from wellness_api.infrastructure.storage import LocalAssetStore, RemoteAssetStore, build_asset_store

APP_VERSION = "1.0.0"


def create_app(
    settings: Optional[Settings] = None,
    *,
    database: Optional[Database] = None,
    asset_store: Optional[RemoteAssetStore] = None,
    payment_gateway: Optional[PaymentGateway] = None,
    fulfillment: Optional[FulfillmentRegistry] = None,
) -> FastAPI:
    """Build the application.

    Collaborators that are passed in are used as-is and left open on
    shutdown; missing ones are built from ``settings`` during startup and
    closed again on shutdown.
    """
    settings = settings or Settings()
    logger = setup_logging(settings)
    owned = []

    if asset_store is None:
        asset_store = build_asset_store(settings)
        owned.append(asset_store)
    if payment_gateway is None:
        payment_gateway = build_payment_gateway(settings)
        owned.append(payment_gateway)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Manage application startup and shutdown."""
        owns_database = database is None
        if owns_database:
            app.state.database = Database(settings.database_url, echo=settings.database_echo)
        if settings.auto_create_schema:
            await app.state.database.create_all()

        for client in owned:
            await client.boot()

        logger.info("Wellness API ready (asset store: %s)", type(app.state.asset_store).__name__)
        yield

        for client in owned:
            await client.close()
        if owns_database:
            await app.state.database.dispose()
        logger.info("Wellness API shut down.")

    app = FastAPI(
        title="Wellness API",
        description="Content and commerce backend for ebooks, nutrition plans, programs, podcasts and blog posts.",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.asset_store = asset_store
    app.state.payment_gateway = payment_gateway
    app.state.fulfillment = fulfillment or default_fulfillment()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, settings)
    app.include_router(api_router)

    # files written by the local store are served by the API itself
    if isinstance(asset_store, LocalAssetStore):
        os.makedirs(asset_store.root, exist_ok=True)
        app.mount(asset_store.url_prefix, StaticFiles(directory=str(asset_store.root)), name="uploads")

    return app


# Server Start
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
