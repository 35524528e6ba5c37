"""MCP SDK bridge.

Builds an ``mcp`` low-level ``Server`` whose tools and resources come from
the core processor, so the stdio and SSE transports expose exactly what
the HTTP endpoint exposes. Blocking backend calls run in worker threads;
concurrent requests are not serialized.
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, List

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents

from ..core.processor import MCPProcessor
from ..exceptions import ResourceNotFound

logger = logging.getLogger(__name__)


class ToolExecutionError(Exception):
    """A tool call failed; the message is the JSON error payload.

    The MCP SDK reports exceptions raised from a ``call_tool`` handler as a
    result with ``isError`` set and the exception text as content.
    """


class MCPServerBridge:
    """Bridge between the core MCP processor and the ``mcp`` SDK server."""

    def __init__(self, processor: MCPProcessor):
        self.processor = processor
        self.server = Server(processor.server_name)
        self._register_handlers()

    def _register_handlers(self) -> None:
        server = self.server

        @server.list_tools()
        async def list_tools() -> List[types.Tool]:
            return self.build_tools()

        @server.call_tool()
        async def call_tool(name: str, arguments: Dict[str, Any] | None) -> List[types.TextContent]:
            return await self.call_tool(name, arguments)

        if self.processor.resources is not None:

            @server.list_resources()
            async def list_resources() -> List[types.Resource]:
                return self.build_resources()

            @server.read_resource()
            async def read_resource(uri: Any) -> Iterable[ReadResourceContents]:
                return await self.read_resource(str(uri))

        logger.info("Registered %d MCP tools", len(self.processor.tool_registry))

    def build_tools(self) -> List[types.Tool]:
        return [
            types.Tool(name=tool["name"], description=tool["description"], inputSchema=tool["inputSchema"])
            for tool in self.processor.tool_registry.list_tools()
        ]

    def build_resources(self) -> List[types.Resource]:
        if self.processor.resources is None:
            return []
        return [
            types.Resource(
                uri=resource["uri"],
                name=resource["name"],
                description=resource["description"],
                mimeType=resource["mimeType"],
            )
            for resource in self.processor.resources.list_resources()
        ]

    async def call_tool(self, name: str, arguments: Dict[str, Any] | None) -> List[types.TextContent]:
        result = await asyncio.to_thread(self.processor.call_tool, name, arguments)
        text = result["content"][0]["text"]
        if result["isError"]:
            raise ToolExecutionError(text)
        return [types.TextContent(type="text", text=text)]

    async def read_resource(self, uri: str) -> List[ReadResourceContents]:
        # AnyUrl may append a trailing slash to opaque URIs like crm://stages
        uri = uri.rstrip("/")
        resources = self.processor.resources
        if resources is None:
            raise ResourceNotFound(uri)
        resource = resources.get(uri)
        text = await asyncio.to_thread(resources.read, uri)
        return [ReadResourceContents(content=text, mime_type=resource.mime_type)]

    def create_initialization_options(self) -> Any:
        return self.server.create_initialization_options()

    async def run(self, read_stream: Any, write_stream: Any) -> None:
        """Serve one MCP session over the given stream pair."""
        await self.server.run(read_stream, write_stream, self.create_initialization_options())
