"""CORS configuration for FastAPI."""

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

if TYPE_CHECKING:
    from standupsync.settings import Settings

logger = logging.getLogger(__name__)


def configure_cors(app: FastAPI, settings: "Settings") -> None:
    """
    Add CORS middleware allowing the configured web app origins.

    Wildcard origins are dropped because credentials are allowed.
    """
    origins = [origin for origin in settings.cors_origins if origin != "*"]
    if len(origins) != len(settings.cors_origins):
        logger.warning("cors_wildcard_removed: allow_credentials=True is incompatible with '*'")

    logger.info(f"cors_configured: origins={origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
