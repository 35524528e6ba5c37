"""Tests for the SSE transport routes that do not hold a stream open."""

import unittest

from starlette.testclient import TestClient

from outlet_crm_mcp.adapters.mcp_bridge import MCPServerBridge
from outlet_crm_mcp.adapters.sse import build_sse_app
from outlet_crm_mcp.core.processor import MCPProcessor
from outlet_crm_mcp.resources import build_resources
from outlet_crm_mcp.services import CRMService
from outlet_crm_mcp.tools import TOOL_NAMES, build_registry
from tests.helpers import FakeBackend


class TestSseApp(unittest.TestCase):
    def setUp(self):
        self.backend = FakeBackend()
        service = CRMService(self.backend)
        processor = MCPProcessor(build_registry(service), resources=build_resources(service))
        self.client = TestClient(build_sse_app(MCPServerBridge(processor)))

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["mode"], "sse")
        self.assertEqual(body["info"]["transport"], "sse")
        self.assertEqual(self.backend.calls, [])

    def test_tools(self):
        response = self.client.get("/tools")
        self.assertEqual([tool["name"] for tool in response.json()["tools"]], TOOL_NAMES)

    def test_message_without_session_rejected(self):
        response = self.client.post("/messages/", json={"jsonrpc": "2.0", "id": 1, "method": "ping"})
        self.assertEqual(response.status_code, 400)

    def test_message_for_unknown_session(self):
        response = self.client.post(
            "/messages/?session_id=0123456789abcdef0123456789abcdef",
            json={"jsonrpc": "2.0", "id": 1, "method": "ping"},
        )
        self.assertEqual(response.status_code, 404)
