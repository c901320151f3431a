"""FastAPI application for ChannelScope API with CORS, lifecycle management, and middleware."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from typing import Any

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apps.api.errors import register_error_handlers
from apps.api.middleware.logging import RequestLoggingMiddleware
from apps.api.middleware.metrics import PrometheusMiddleware
from apps.api.routes import channels, listings, metrics
from apps.api.schemas.envelope import ResponseEnvelope
from packages.clients.youtube_provider import YouTubeChannelProvider
from packages.common.config import get_config
from packages.common.logging import setup_logging

logger = logging.getLogger(__name__)

# Single source of truth for version
try:
    VERSION = get_version("channelscope")
except PackageNotFoundError:
    # Fallback for development or when package not installed
    VERSION = os.getenv("CHANNELSCOPE_VERSION", "0.1.0")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle: startup and shutdown.

    Startup:
        - Create the pooled httpx.AsyncClient shared by all upstream calls
        - Create the YouTube channel provider on top of it

    Shutdown:
        - Close the HTTP client
    """
    config = get_config()
    logger.info("Starting ChannelScope API", extra={"version": VERSION})

    if config.youtube_api_key is None:
        logger.warning("YOUTUBE_API_KEY is not set; Data API lookups will fail")

    http_client = httpx.AsyncClient(
        timeout=config.http_timeout,
        limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
        headers={"User-Agent": f"channelscope/{VERSION}"},
    )
    app.state.http_client = http_client
    app.state.provider = YouTubeChannelProvider(config.provider_settings, client=http_client)
    logger.info("ChannelScope API startup complete")

    yield

    logger.info("Shutting down ChannelScope API")
    try:
        await http_client.aclose()
        logger.info("HTTP client closed")
    except Exception as e:
        logger.exception("Error closing HTTP client", extra={"error": str(e)})
    logger.info("ChannelScope API shutdown complete")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    config = get_config()
    setup_logging(config.log_level)

    application = FastAPI(
        title="ChannelScope API",
        version=VERSION,
        description="YouTube channel reference resolution",
        lifespan=lifespan,
    )

    register_error_handlers(application)

    # Add CORS middleware
    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_credentials="*" not in config.cors_allow_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Add request logging middleware
    application.add_middleware(RequestLoggingMiddleware)

    # Add Prometheus metrics middleware
    application.add_middleware(PrometheusMiddleware)

    # Register routers
    application.include_router(channels.router)
    application.include_router(listings.router)
    application.include_router(metrics.router)

    @application.get("/health")
    async def health() -> dict[str, Any]:
        """Liveness check.

        Returns:
            ResponseEnvelope[dict]: Service status and whether an API key is configured.
        """
        return ResponseEnvelope[dict[str, Any]](
            data={"status": "ok", "api_key_configured": get_config().youtube_api_key is not None},
        ).model_dump()

    @application.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint.

        Returns:
            ResponseEnvelope[dict]: API info with version and docs link.
        """
        return ResponseEnvelope[dict[str, str]](
            data={"message": f"ChannelScope API v{VERSION}", "docs": "/docs"},
        ).model_dump()

    return application


app = create_app()


__all__ = ["VERSION", "app", "create_app", "lifespan"]
