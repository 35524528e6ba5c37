"""Core MCP request processor - transport agnostic.

Handles JSON-RPC 2.0 envelopes (``initialize``, ``ping``, ``tools/list``,
``tools/call``, ``resources/list``, ``resources/read`` and notifications)
for transports that do not speak MCP through the ``mcp`` SDK, i.e. the
plain HTTP endpoint.
"""

import logging
from typing import Any, Dict, Optional

from ..exceptions import CRMError, InvalidRequest, MethodNotFound
from ..formatting import tool_error, tool_result
from ..resources import ResourceCatalog
from .tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"


class MCPProcessor:
    """Core MCP request processor that works across all transports."""

    def __init__(
        self,
        tool_registry: ToolRegistry,
        resources: Optional[ResourceCatalog] = None,
        server_name: str = "outlet-crm",
        server_version: str = "0.0.0",
    ):
        self.tool_registry = tool_registry
        self.resources = resources
        self.server_name = server_name
        self.server_version = server_version

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Invoke a tool and shape the outcome as an MCP ``tools/call`` result.

        Tool failures never escape: they come back with ``isError`` set.
        """
        try:
            result = self.tool_registry.invoke(name, arguments)
        except CRMError as e:
            logger.warning("Tool %s failed (%s): %s", name, e.code, e.message)
            return tool_error(e.message)
        return tool_result(result)

    def process_request(self, request: Any) -> Optional[Dict[str, Any]]:
        """Process an MCP request and return response.

        Args:
            request: MCP JSON-RPC request

        Returns:
            MCP JSON-RPC response, or None for notifications
        """
        request_id = request.get("id") if isinstance(request, dict) else None

        try:
            if not isinstance(request, dict):
                raise InvalidRequest("Request must be a JSON object")

            if request.get("jsonrpc", "2.0") != "2.0":
                raise InvalidRequest("Invalid jsonrpc version, must be '2.0'")

            method = request.get("method")
            if not method or not isinstance(method, str):
                raise InvalidRequest("Missing 'method' field")

            if method.startswith("notifications/"):
                logger.debug("Notification received: %s", method)
                return None

            params = request.get("params") or {}
            if not isinstance(params, dict):
                raise InvalidRequest("'params' must be an object")

            result = self._handle_method(method, params)
            return {"jsonrpc": "2.0", "id": request_id, "result": result}

        except CRMError as e:
            return self._error_response(request_id, e)
        except Exception as e:
            logger.exception("Unexpected error processing request")
            return self._error_response(request_id, CRMError(f"Internal error: {e}"))

    def _handle_method(self, method: str, params: Dict[str, Any]) -> Any:
        if method == "initialize":
            return self._handle_initialize(params)
        if method == "ping":
            return {}
        if method == "tools/list":
            return {"tools": self.tool_registry.list_tools()}
        if method == "tools/call":
            return self._handle_tools_call(params)
        if method == "resources/list":
            return {"resources": self.resources.list_resources() if self.resources else []}
        if method == "resources/read":
            return self._handle_resources_read(params)

        raise MethodNotFound(method)

    def _handle_initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        client_info = params.get("clientInfo") or {}
        logger.info(
            "MCP client connected: %s v%s (protocol: %s)",
            client_info.get("name", "unknown"),
            client_info.get("version", "unknown"),
            params.get("protocolVersion", "unknown"),
        )
        capabilities: Dict[str, Any] = {"tools": {}}
        if self.resources is not None:
            capabilities["resources"] = {}
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": capabilities,
            "serverInfo": {"name": self.server_name, "version": self.server_version},
        }

    def _handle_tools_call(self, params: Dict[str, Any]) -> Dict[str, Any]:
        tool_name = params.get("name")
        if not tool_name or not isinstance(tool_name, str):
            raise InvalidRequest("Missing 'name' in tools/call")
        return self.call_tool(tool_name, params.get("arguments"))

    def _handle_resources_read(self, params: Dict[str, Any]) -> Dict[str, Any]:
        uri = params.get("uri")
        if not uri or not isinstance(uri, str):
            raise InvalidRequest("Missing 'uri' in resources/read")
        if self.resources is None:
            raise InvalidRequest("Resources are not enabled")
        resource = self.resources.get(uri)
        return {
            "contents": [
                {"uri": uri, "mimeType": resource.mime_type, "text": self.resources.read(uri)},
            ]
        }

    def _error_response(self, request_id: Optional[Any], error: CRMError) -> Dict[str, Any]:
        return {"jsonrpc": "2.0", "id": request_id, "error": error.to_dict()}
