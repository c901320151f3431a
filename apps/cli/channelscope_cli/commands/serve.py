"""CLI serve command implementation."""

from __future__ import annotations

import uvicorn

from packages.common.config import get_config


def serve_command(host: str | None = None, port: int | None = None, reload: bool = False) -> None:
    """Run the HTTP API with uvicorn; defaults come from the configuration."""
    config = get_config()
    uvicorn.run(
        "apps.api.app:app",
        host=host or config.host,
        port=port or config.port,
        reload=reload,
        log_config=None,
    )


__all__ = ["serve_command"]
