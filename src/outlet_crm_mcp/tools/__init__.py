"""MCP tools for the Outlet CRM.

Tool declarations (name, description, input schema) live here; behavior
lives in ``outlet_crm_mcp.services.crm_service``. ``build_registry`` binds
the two together for one backend.

Example usage:
    from outlet_crm_mcp.services import CRMService
    from outlet_crm_mcp.tools import build_registry

    registry = build_registry(CRMService(backend))
    registry.invoke("get_leads", {"stage_slug": "orcamento", "limit": 5})
"""

from typing import List, Tuple, Type

from ..core.schema import ToolInput
from ..core.tool_registry import ToolRegistry
from ..models.inputs import (
    CreateLeadInput,
    GetLeadHistoryInput,
    GetLeadsInput,
    GetPipelineStatsInput,
    SearchPriceCatalogInput,
    UpdateLeadCustomFieldsInput,
    UpdateLeadStageInput,
)
from ..services.crm_service import CRMService

TOOL_DECLARATIONS: List[Tuple[str, str, Type[ToolInput]]] = [
    ("get_leads", "Get leads from the CRM pipeline. Can filter by stage and vendedor.", GetLeadsInput),
    ("update_lead_stage", "Move a lead to a different pipeline stage.", UpdateLeadStageInput),
    (
        "update_lead_custom_fields",
        "Update custom fields on a lead (tipo_tinta, quantidade_litros, cor_desejada, valor_estimado, etc). "
        "Fields not given keep their current value.",
        UpdateLeadCustomFieldsInput,
    ),
    ("create_lead", "Create a new lead in the CRM.", CreateLeadInput),
    (
        "search_price_catalog",
        "Search the paint price catalog by product name, category, or description.",
        SearchPriceCatalogInput,
    ),
    (
        "get_lead_history",
        "Get the activity history for a lead (stage changes, updates).",
        GetLeadHistoryInput,
    ),
    (
        "get_pipeline_stats",
        "Get statistics for each pipeline stage (lead count, total value).",
        GetPipelineStatsInput,
    ),
]

TOOL_NAMES = [name for name, _, _ in TOOL_DECLARATIONS]


def build_registry(service: CRMService) -> ToolRegistry:
    """Register every CRM tool against ``service``'s handlers."""
    registry = ToolRegistry()
    for name, description, input_model in TOOL_DECLARATIONS:
        registry.register_tool(name, getattr(service, name), description=description, input_model=input_model)
    return registry


__all__ = ["TOOL_DECLARATIONS", "TOOL_NAMES", "build_registry"]
