"""Pydantic models for tool inputs (``inputs``) and results (``responses``)."""

from .responses import LeadMutationResult, StageStats

__all__ = ["LeadMutationResult", "StageStats"]
