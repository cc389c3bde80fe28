"""
FastAPI application factory.

``create_app()`` is the single composition root of the report browser:
settings go on ``app.state``, the report routes are mounted and logging is
configured once.
"""

from __future__ import annotations

from fastapi import FastAPI

from donut import __version__
from donut.api.routes import router
from donut.core.settings import DonutSettings, get_settings
from donut.logging import configure_logging


def create_app(*, settings: DonutSettings | None = None) -> FastAPI:
    """Build the report browsing app."""
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, format=settings.log_format)

    app = FastAPI(
        title="Donut Reporting",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.include_router(router)
    return app
