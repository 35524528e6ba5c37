"""STDIO transport: one process, one MCP session over stdin/stdout."""

import asyncio

from mcp.server.stdio import stdio_server

from .mcp_bridge import MCPServerBridge


async def serve_stdio(bridge: MCPServerBridge) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await bridge.run(read_stream, write_stream)


def run_stdio(bridge: MCPServerBridge) -> None:
    """Run the MCP session until the client closes stdin."""
    asyncio.run(serve_stdio(bridge))
