"""Server assembly: logging, backend, tools, and the selected transport."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from . import __version__
from .backends import CRMBackend, get_backend
from .config import ServerConfig
from .core.processor import MCPProcessor
from .resources import build_resources
from .services import CRMService
from .tools import build_registry

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Send all logging to stderr so stdout stays reserved for JSON-RPC."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def create_processor(config: ServerConfig, backend: Optional[CRMBackend] = None) -> MCPProcessor:
    """Wire backend, service, tools and resources into one processor."""
    if backend is None:
        backend = get_backend(config)
    service = CRMService(backend)
    registry = build_registry(service)
    logger.info("Registered %d tools", len(registry))
    return MCPProcessor(
        registry,
        resources=build_resources(service),
        server_name=config.server_name,
        server_version=__version__,
    )


def run_server(config: ServerConfig, backend: Optional[CRMBackend] = None) -> None:
    """Run the MCP server on the configured transport.

    Raises:
        SystemExit: configuration is invalid
    """
    configure_logging(config.log_level)

    if config.invalid_transport:
        logger.warning("Invalid transport '%s', using '%s'", config.invalid_transport, config.transport)

    validation = config.validate()
    if not validation.is_valid and backend is None:
        for error in validation.errors:
            logger.error("Configuration error: %s", error)
        raise SystemExit(2)

    logger.info("Starting Outlet CRM MCP server %s: %s", __version__, config.to_dict())
    processor = create_processor(config, backend)

    try:
        if config.transport == "stdio":
            from .adapters.mcp_bridge import MCPServerBridge
            from .adapters.stdio import run_stdio

            logger.info("Outlet CRM MCP Server running on stdio")
            run_stdio(MCPServerBridge(processor))
            return

        import uvicorn

        if config.transport == "sse":
            from .adapters.mcp_bridge import MCPServerBridge
            from .adapters.sse import build_sse_app

            app = build_sse_app(MCPServerBridge(processor))
            logger.info("SSE endpoint: http://%s:%d/sse", config.host, config.port)
            logger.info("Messages:     http://%s:%d/messages/", config.host, config.port)
        else:
            from .adapters.http import build_http_app

            app = build_http_app(processor)
            logger.info("Endpoint: POST http://%s:%d/mcp", config.host, config.port)
            logger.info("Health:   GET  http://%s:%d/health", config.host, config.port)
            logger.info("Tools:    GET  http://%s:%d/tools", config.host, config.port)

        uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())

    except OSError as e:
        error_msg = str(e)
        logger.error("Error starting MCP server: %s", error_msg)
        if "address already in use" in error_msg.lower():
            logger.error("Port %d is already in use. Set PORT or pass --port to choose another.", config.port)
        raise
