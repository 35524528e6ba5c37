"""Shared exception types for the Outlet CRM MCP server.

Every error a tool can raise derives from ``CRMError`` so the invocation
boundary (MCP bridge, HTTP adapter, envelope processor) can turn it into a
structured failure response without inspecting the concrete type.
"""

from __future__ import annotations

from typing import Any, Optional


class CRMError(Exception):
    """Base exception for CRM MCP errors."""

    code: int = -32603
    http_status: int = 500

    def __init__(self, message: str, data: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.data = data

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-RPC error format."""
        error_dict: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error_dict["data"] = self.data
        return error_dict


class InvalidRequest(CRMError):
    """Malformed request envelope."""

    code = -32600
    http_status = 400


class MethodNotFound(CRMError):
    """JSON-RPC method the server does not implement."""

    code = -32601
    http_status = 400

    def __init__(self, method: str):
        super().__init__(f"Method not found: {method}", data={"method": method})
        self.method = method


class ValidationError(CRMError):
    """Tool arguments do not match the declared input schema."""

    code = -32602
    http_status = 400

    def __init__(self, field: str, constraint: str, message: Optional[str] = None):
        super().__init__(
            message or f"Invalid argument '{field}': {constraint}",
            data={"field": field, "constraint": constraint},
        )
        self.field = field
        self.constraint = constraint


class UnknownTool(CRMError):
    """Requested tool does not exist."""

    code = -32601
    http_status = 400

    def __init__(self, tool_name: str):
        super().__init__(f"Unknown tool: {tool_name}", data={"tool": tool_name})
        self.tool_name = tool_name


class StageNotFound(CRMError):
    """No pipeline stage matches the given slug."""

    code = -32004
    http_status = 404

    def __init__(self, slug: str):
        super().__init__(f"Stage not found: {slug}", data={"slug": slug})
        self.slug = slug


class LeadNotFound(CRMError):
    """No lead matches the given id."""

    code = -32004
    http_status = 404

    def __init__(self, lead_id: str):
        super().__init__(f"Lead not found: {lead_id}", data={"lead_id": lead_id})
        self.lead_id = lead_id


class ResourceNotFound(CRMError):
    """Unknown resource URI."""

    code = -32002
    http_status = 404

    def __init__(self, uri: str):
        super().__init__(f"Resource not found: {uri}", data={"uri": uri})
        self.uri = uri


class BackendError(CRMError):
    """The relational backend rejected or failed a query.

    The backend's own message is passed through verbatim so callers see the
    real cause (constraint violation, bad column, network failure).
    """

    code = -32603
    http_status = 502

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message, data={"operation": operation} if operation else None)
        self.operation = operation
