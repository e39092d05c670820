"""Application factory for the HTTP tool API."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from evolution_mcp import __version__
from evolution_mcp.config import Settings, get_settings
from evolution_mcp.tools import ToolRegistry
from evolution_mcp.utils.logger import setup_logging


def _log_missing_credentials(settings: Settings, logger: logging.Logger) -> None:
    evolution = settings.evolution
    if not evolution.api_key:
        logger.warning("EVOLUTION_APIKEY is not set; authenticated tools will fail")
    if not evolution.instance:
        logger.warning("EVOLUTION_INSTANCE is not set; instance-scoped tools will fail")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create FastAPI application serving the Evolution tool catalog."""
    from evolution_mcp.server.http import router as mcp_router

    settings = settings or get_settings()
    setup_logging(settings.logging)
    logger = logging.getLogger(__name__)

    _log_missing_credentials(settings, logger)
    logger.info(
        "MCP server config loaded",
        extra={
            "tools_registered_count": len(ToolRegistry.names()),
            "tools_enabled_count": len(settings.tools.enabled),
            "api_base": settings.evolution.base_url(),
        },
    )

    app = FastAPI(title="Evolution API MCP Server", version=__version__)
    app.include_router(mcp_router)
    return app
