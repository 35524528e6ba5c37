"""Tests for the read-only CRM resources."""

import json

import pytest

from outlet_crm_mcp.exceptions import BackendError, ResourceNotFound
from outlet_crm_mcp.resources import ResourceCatalog, ResourceDefinition, build_resources


@pytest.fixture
def catalog(service):
    return build_resources(service)


def test_list_resources(catalog):
    assert catalog.list_resources() == [
        {
            "uri": "crm://stages",
            "name": "Pipeline Stages",
            "description": "All pipeline stages with colors",
            "mimeType": "application/json",
        },
        {
            "uri": "crm://custom-fields",
            "name": "Custom Field Definitions",
            "description": "Available custom fields for leads",
            "mimeType": "application/json",
        },
    ]


def test_read_stages(catalog):
    stages = json.loads(catalog.read("crm://stages"))
    assert [stage["slug"] for stage in stages] == ["lead", "orcamento", "negociacao", "fechado", "curioso"]
    assert stages[1]["name"] == "Orçamento"


def test_read_custom_fields(catalog):
    fields = json.loads(catalog.read("crm://custom-fields"))
    assert [field["key"] for field in fields] == ["tipo_tinta", "valor_estimado"]


def test_unknown_uri(catalog):
    with pytest.raises(ResourceNotFound) as excinfo:
        catalog.read("crm://leads")
    assert excinfo.value.uri == "crm://leads"


def test_backend_failure_propagates(catalog, backend):
    backend.fail("select", "relation does not exist")
    with pytest.raises(BackendError):
        catalog.read("crm://stages")


def test_custom_mime_type():
    catalog = ResourceCatalog(
        [ResourceDefinition(uri="crm://note", name="Note", description="", reader=lambda: "hi", mime_type="text/plain")]
    )
    assert catalog.get("crm://note").mime_type == "text/plain"
    assert catalog.read("crm://note") == '"hi"'
