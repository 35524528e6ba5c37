"""Health check and discovery endpoint handlers for the HTTP-based transports."""

from datetime import datetime, timezone
from typing import Any, Dict

from starlette.requests import Request
from starlette.responses import JSONResponse

from . import __version__

SERVER_ID = "outlet-mcp-server"

NO_CACHE_HEADERS = {"Cache-Control": "no-cache, no-store, must-revalidate"}


def get_server_info(transport: str) -> Dict[str, Any]:
    return {"name": SERVER_ID, "version": __version__, "transport": transport}


def build_health_response(transport: str, **extra: Any) -> JSONResponse:
    """Health payload; never touches the backend."""
    content: Dict[str, Any] = {
        "status": "ok",
        "server": SERVER_ID,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "info": get_server_info(transport),
    }
    content.update(extra)
    return JSONResponse(content=content, status_code=200, headers=NO_CACHE_HEADERS)


def make_health_handler(transport: str, **extra: Any):
    async def health_check_handler(request: Request) -> JSONResponse:
        return build_health_response(transport, **extra)

    return health_check_handler


def make_tools_handler(tool_registry):
    async def tools_handler(request: Request) -> JSONResponse:
        """List tools (name, description, input schema) for easier testing."""
        return JSONResponse({"tools": tool_registry.list_tools()})

    return tools_handler
