"""SSE transport.

``GET /sse`` opens the event stream for one MCP session and announces the
message endpoint; ``POST /messages/?session_id=...`` delivers client
messages into that session.
"""

import logging

from mcp.server.sse import SseServerTransport
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Mount, Route

from ..health import make_health_handler, make_tools_handler
from .mcp_bridge import MCPServerBridge

logger = logging.getLogger(__name__)

MESSAGES_PATH = "/messages/"


def build_sse_app(bridge: MCPServerBridge) -> Starlette:
    """Create the Starlette app serving MCP over server-sent events."""
    sse = SseServerTransport(MESSAGES_PATH)

    async def handle_sse(request: Request) -> Response:
        client = request.client.host if request.client else "unknown"
        logger.info("SSE session opened from %s", client)
        async with sse.connect_sse(request.scope, request.receive, request._send) as (read_stream, write_stream):
            await bridge.run(read_stream, write_stream)
        logger.info("SSE session from %s closed", client)
        return Response()

    routes = [
        Route("/sse", endpoint=handle_sse, methods=["GET"]),
        Mount(MESSAGES_PATH, app=sse.handle_post_message),
        Route("/health", endpoint=make_health_handler("sse", mode="sse"), methods=["GET"]),
        Route("/tools", endpoint=make_tools_handler(bridge.processor.tool_registry), methods=["GET"]),
    ]
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["mcp-session-id"],
            allow_credentials=False,
        )
    ]
    return Starlette(routes=routes, middleware=middleware)
