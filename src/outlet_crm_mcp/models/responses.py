"""Response models returned by the CRM service."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field


class LeadMutationResult(BaseModel):
    """Outcome of a lead create/update: confirmation text plus the stored row."""

    success: Literal[True] = True
    message: str
    lead: Dict[str, Any] = Field(default_factory=dict)


class StageStats(BaseModel):
    """Aggregated figures for one pipeline stage."""

    count: int = 0
    total_value: Union[int, float] = 0
    stage_name: Optional[str] = None
