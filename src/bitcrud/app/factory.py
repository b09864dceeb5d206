"""
Application factory for FastAPI.

This module provides the create_app() function that creates and configures
the FastAPI application instance.
"""

from typing import Mapping, Optional

from fastapi import FastAPI

from ..core.config import settings
from ..core.lifespan import lifespan
from ..core.middleware import CorrelationIdMiddleware
from ..crud import Crud, crud_router
from .routes import health_router


def create_app(resources: Optional[Mapping[str, Crud]] = None) -> FastAPI:
    """
    Application factory function.

    Args:
        resources: Mapping of resource path segment to controller; each
            controller is served under {api_prefix}/{name}

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.api.app_name,
        version=settings.api.app_version,
        debug=settings.api.debug,
        lifespan=lifespan,
    )

    # Correlation ID middleware so every log line can be tied to its request
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(health_router)

    for name, controller in (resources or {}).items():
        app.include_router(
            crud_router(controller, prefix=f"/{name}"),
            prefix=settings.api.api_prefix,
        )

    return app
