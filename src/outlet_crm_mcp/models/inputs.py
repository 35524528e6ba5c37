"""Pydantic models for MCP tool input parameters.

One model per tool. ``tools/list`` advertises the JSON Schema generated from
these models, and the registry validates arguments against them before any
backend call.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Optional
from uuid import UUID

from pydantic import Field

from ..core.schema import Email, ToolInput

STAGE_SLUGS_HINT = "lead, orcamento, negociacao, fechado, curioso"


class GetLeadsInput(ToolInput):
    """Parameters for get_leads tool."""

    stage_slug: Annotated[Optional[str], Field(description=f"Filter by stage: {STAGE_SLUGS_HINT}")] = None
    vendedor_id: Annotated[Optional[UUID], Field(description="Filter by vendedor (seller) UUID")] = None
    limit: Annotated[int, Field(ge=1, description="Max results (default 50)")] = 50


class UpdateLeadStageInput(ToolInput):
    """Parameters for update_lead_stage tool."""

    lead_id: Annotated[UUID, Field(description="UUID of the lead")]
    new_stage_slug: Annotated[str, Field(description=f"New stage: {STAGE_SLUGS_HINT}")]


class UpdateLeadCustomFieldsInput(ToolInput):
    """Parameters for update_lead_custom_fields tool."""

    lead_id: Annotated[UUID, Field(description="UUID of the lead")]
    custom_fields: Annotated[
        Dict[str, Any],
        Field(
            description="Key-value pairs to merge into the lead's custom fields",
            examples=[{"tipo_tinta": "acrílica", "quantidade_litros": 36, "valor_estimado": 780}],
        ),
    ]


class CreateLeadInput(ToolInput):
    """Parameters for create_lead tool."""

    name: Annotated[str, Field(description="Contact name")]
    phone: Annotated[Optional[str], Field(description="Phone number")] = None
    email: Annotated[Optional[Email], Field(description="Email address")] = None
    stage_slug: Annotated[str, Field(description="Initial stage (default: lead)")] = "lead"
    vendedor_id: Annotated[UUID, Field(description="UUID of the vendedor (seller) responsible")]
    custom_fields: Annotated[Optional[Dict[str, Any]], Field(description="Custom fields for the lead")] = None
    notes: Annotated[Optional[str], Field(description="Notes about the lead")] = None


class SearchPriceCatalogInput(ToolInput):
    """Parameters for search_price_catalog tool."""

    query: Annotated[
        str,
        Field(
            description="Search term matched against product name, description and category",
            examples=["acrílica 18L", "esmalte"],
        ),
    ]
    category: Annotated[Optional[str], Field(description="Filter by exact category")] = None
    limit: Annotated[int, Field(ge=1, description="Max results (default 10)")] = 10


class GetLeadHistoryInput(ToolInput):
    """Parameters for get_lead_history tool."""

    lead_id: Annotated[UUID, Field(description="UUID of the lead")]


class GetPipelineStatsInput(ToolInput):
    """Parameters for get_pipeline_stats tool (none)."""
