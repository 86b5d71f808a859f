"""Catalog service ASGI entrypoint (`uvicorn catalog_service.app.main:app`)."""

from __future__ import annotations

from fastapi import FastAPI

from catalog_service.app.exception_handlers import configure_exception_handlers
from catalog_service.app.lifespan import lifespan
from catalog_service.app.middleware import RequestIDMiddleware
from catalog_service.app.router import setup_routers
from catalog_service.core.settings import get_app_settings


def create_app() -> FastAPI:
    """Build the app: request ids, problem-details handlers, then the versioned routers."""
    settings = get_app_settings()

    app = FastAPI(
        title=settings.title,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(RequestIDMiddleware)
    configure_exception_handlers(app)
    setup_routers(app, settings)

    return app


app = create_app()
