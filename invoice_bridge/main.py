"""
FastAPI application entrypoint for the FreshBooks to Kforce invoice bridge.
"""

from __future__ import annotations

from fastapi import FastAPI

from invoice_bridge.api.routes import router
from invoice_bridge.core.config import get_settings
from invoice_bridge.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="FreshBooks Kforce Invoice Bridge",
        version="0.1.0",
        description="Converts new FreshBooks invoices into Kforce CSV attachments.",
    )
    # FreshBooks callbacks are registered against the root path.
    app.include_router(router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
