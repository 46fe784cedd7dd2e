"""FastAPI application entry point."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import health, lockers, relay, shipping
from .config import Settings, settings as default_settings
from .services.lockers import LockerDirectoryService, LockerRelay
from .services.shipping import ShippingClient


def create_app(
    settings: Settings | None = None,
    directory: LockerDirectoryService | None = None,
    shipping_client: ShippingClient | None = None,
    locker_relay: LockerRelay | None = None,
) -> FastAPI:
    config = settings or default_settings
    app = FastAPI(title=config.app_name, root_path="")
    app.state.settings = config
    app.state.directory = directory or LockerDirectoryService(config)
    app.state.shipping = shipping_client or ShippingClient(config)
    app.state.relay = locker_relay or LockerRelay(config)

    if config.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(config.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": config.app_name,
            "status": "running",
            "api_prefix": config.api_prefix,
            "health": f"{config.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=config.api_prefix)
    app.include_router(lockers.router, prefix=config.api_prefix)
    app.include_router(shipping.router, prefix=config.api_prefix)
    app.include_router(relay.router, prefix=config.api_prefix)
    return app


app = create_app()
