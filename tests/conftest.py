"""Test configuration for pytest."""

import os

import pytest

from outlet_crm_mcp.config import ServerConfig
from outlet_crm_mcp.core.processor import MCPProcessor
from outlet_crm_mcp.resources import build_resources
from outlet_crm_mcp.services import CRMService
from outlet_crm_mcp.tools import build_registry
from tests.helpers import FakeBackend


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless a Supabase project is configured."""
    if os.getenv("SUPABASE_URL") and os.getenv("SUPABASE_SERVICE_KEY"):
        return
    skip = pytest.mark.skip(reason="SUPABASE_URL / SUPABASE_SERVICE_KEY not set")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def service(backend: FakeBackend) -> CRMService:
    return CRMService(backend)


@pytest.fixture
def registry(service: CRMService):
    return build_registry(service)


@pytest.fixture
def processor(service: CRMService, registry) -> MCPProcessor:
    return MCPProcessor(registry, resources=build_resources(service), server_name="outlet-crm", server_version="test")


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-role-key-for-tests",
    )
