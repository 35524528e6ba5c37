"""Transport adapters for the MCP server.

Each adapter only translates envelopes; tool behavior is shared:

- mcp_bridge: ``mcp`` SDK server built from the core processor
- stdio: MCP over process standard streams
- sse: MCP over server-sent events (Starlette)
- http: JSON-RPC and direct tool calls over plain HTTP (Starlette)
"""

from .http import build_http_app
from .mcp_bridge import MCPServerBridge
from .sse import build_sse_app
from .stdio import run_stdio

__all__ = ["MCPServerBridge", "build_http_app", "build_sse_app", "run_stdio"]
