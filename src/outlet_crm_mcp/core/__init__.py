"""Core MCP processing components.

Transport-agnostic pieces shared by the stdio, SSE and HTTP bindings:
- schema: pydantic base for tool input models, JSON Schema and argument validation
- tool_registry: tool registration, discovery and invocation
- processor: JSON-RPC envelope handling
"""

from .processor import MCPProcessor
from .schema import ToolInput, input_schema, validate_arguments
from .tool_registry import ToolDefinition, ToolRegistry

__all__ = ["MCPProcessor", "ToolDefinition", "ToolInput", "ToolRegistry", "input_schema", "validate_arguments"]
