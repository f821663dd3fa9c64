"""FastAPI application entry point."""

import logging

from fastapi import FastAPI

from app import __version__
from app.api import health, patch
from app.config import settings

logging.basicConfig(level=settings.log_level)

app = FastAPI(
    title="JSON Patch Service",
    description="Minimal and invertible JSON Patch computation",
    version=__version__,
    debug=settings.debug,
)

app.include_router(health.router, tags=["health"])
app.include_router(patch.router, prefix="/patch", tags=["patch"])
