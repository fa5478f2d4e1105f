"""
Webhook Application Entry Point

This module defines the FastAPI application that receives content-saved
notifications from WordPress, registers its routers and the global
exception handler, and provides a test-friendly application factory.
"""

from __future__ import annotations

import contextlib
import logging
from fastapi import FastAPI

from .core.errors import unhandled_exception_handler
from .api import content_routes, health_routes
from .api.dependencies import get_content_client, get_search_client

logger = logging.getLogger("indexer.app")


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting wp-search-indexer")
    yield

    # Close the shared HTTP clients if they were ever created
    if get_search_client.cache_info().currsize:
        get_search_client().close()
    if get_content_client.cache_info().currsize:
        get_content_client().close()
    logger.info("Shutting down wp-search-indexer")


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    app = FastAPI(
        title="wp-search-indexer",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health_routes.router)
    app.include_router(content_routes.router)

    return app


app = create_app()
