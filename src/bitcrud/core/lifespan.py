"""
Application lifespan management.

Handles startup and shutdown events for the FastAPI application.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import settings
from .database import close_db, init_db
from .logging_config import LogConfig, setup_logging, stop_queue_listener


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    setup_logging(LogConfig(**settings.logging.log_config))
    logger = logging.getLogger("bitcrud")

    logger.info(f"Starting {settings.api.app_name} {settings.api.app_version}")
    await init_db()

    yield

    logger.info(f"Shutting down {settings.api.app_name}")
    await close_db()
    stop_queue_listener()
