"""Tool registry for managing MCP tools in a transport-agnostic way."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Type

from ..exceptions import UnknownTool
from .schema import ToolInput, input_schema, validate_arguments

logger = logging.getLogger(__name__)


@dataclass
class ToolDefinition:
    """Definition of an MCP tool."""

    name: str
    description: str
    handler: Callable[..., Any]
    input_model: Type[ToolInput]

    def to_mcp_format(self) -> Dict[str, Any]:
        """Convert to MCP tools/list format."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": input_schema(self.input_model),
        }


class ToolRegistry:
    """Registry for managing MCP tools.

    Registration order is preserved so ``list_tools`` is stable across
    transports.
    """

    def __init__(self):
        self._tools: Dict[str, ToolDefinition] = {}

    def register_tool(
        self,
        name: str,
        handler: Callable[..., Any],
        description: str = "",
        input_model: Type[ToolInput] | None = None,
    ) -> None:
        """Register a tool handler.

        Args:
            name: Tool name
            handler: Callable invoked with the validated arguments as keywords
            description: Tool description for MCP clients
            input_model: Pydantic model of the arguments (no arguments when omitted)
        """
        if name in self._tools:
            raise ValueError(f"Tool already registered: {name}")
        if not description:
            description = (handler.__doc__ or f"Execute {name}").strip().splitlines()[0]

        self._tools[name] = ToolDefinition(
            name=name,
            description=description,
            handler=handler,
            input_model=input_model or ToolInput,
        )
        logger.debug("Registered tool: %s", name)

    def get_tool(self, name: str) -> ToolDefinition:
        """Get a tool by name."""
        if name not in self._tools:
            raise UnknownTool(name)
        return self._tools[name]

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def list_tools(self) -> List[Dict[str, Any]]:
        """List all registered tools in MCP format."""
        return [tool.to_mcp_format() for tool in self._tools.values()]

    def invoke(self, name: str, arguments: Dict[str, Any] | None = None) -> Any:
        """Validate ``arguments`` and call the named tool.

        Raises:
            UnknownTool: no tool registered under ``name``
            ValidationError: arguments do not fit the tool's input model
            CRMError: any failure raised by the handler itself
        """
        tool = self.get_tool(name)
        validated = validate_arguments(tool.input_model, arguments)
        logger.info("Invoking tool: %s", name)
        logger.debug("Tool %s arguments: %s", name, validated)
        return tool.handler(**validated)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools
