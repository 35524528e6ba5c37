"""Plain HTTP transport.

Endpoints:
    POST /mcp     JSON-RPC envelope (``tools/list``, ``tools/call``, ...) or a
                  direct ``{"tool": ..., "arguments": {...}}`` call
    GET  /health  liveness, no backend access
    GET  /tools   tool listing
"""

import json
import logging
from typing import Any, Dict

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from ..core.processor import MCPProcessor
from ..exceptions import CRMError
from ..formatting import to_jsonable
from ..health import make_health_handler, make_tools_handler

logger = logging.getLogger(__name__)

INVALID_REQUEST = {"error": "Invalid request"}


async def _direct_call(processor: MCPProcessor, body: Dict[str, Any]) -> JSONResponse:
    tool_name = body["tool"]
    arguments = body.get("arguments") or {}
    try:
        result = await run_in_threadpool(processor.tool_registry.invoke, tool_name, arguments)
    except CRMError as e:
        logger.warning("Direct call to %s failed (%s): %s", tool_name, e.code, e.message)
        return JSONResponse(
            {"success": False, "error": e.message, "error_code": e.code},
            status_code=e.http_status,
        )
    return JSONResponse({"success": True, "result": to_jsonable(result)})


def build_http_app(processor: MCPProcessor) -> Starlette:
    """Create the Starlette app serving the CRM tools over plain HTTP."""

    async def mcp_endpoint(request: Request) -> Response:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return JSONResponse(INVALID_REQUEST, status_code=400)

        if not isinstance(body, dict):
            return JSONResponse(INVALID_REQUEST, status_code=400)

        try:
            if "method" in body:
                response = await run_in_threadpool(processor.process_request, body)
                if response is None:
                    return Response(status_code=202)
                return JSONResponse(response)

            if body.get("tool"):
                return await _direct_call(processor, body)
        except Exception as e:
            logger.exception("MCP Error")
            return JSONResponse({"error": str(e) or "Internal error"}, status_code=500)

        return JSONResponse(INVALID_REQUEST, status_code=400)

    routes = [
        Route("/mcp", endpoint=mcp_endpoint, methods=["POST"]),
        Route("/health", endpoint=make_health_handler("http"), methods=["GET"]),
        Route("/tools", endpoint=make_tools_handler(processor.tool_registry), methods=["GET"]),
    ]
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
            allow_credentials=False,
        )
    ]
    return Starlette(routes=routes, middleware=middleware)
