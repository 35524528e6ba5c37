"""JSON rendering of tool results for MCP text content."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from pydantic import BaseModel


def to_jsonable(result: Any) -> Any:
    """Convert Pydantic models (also nested in dicts/lists) to plain JSON data."""
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, dict):
        return {key: to_jsonable(value) for key, value in result.items()}
    if isinstance(result, (list, tuple)):
        return [to_jsonable(item) for item in result]
    return result


def serialize_result(result: Any) -> str:
    """Serialize result to pretty-printed JSON, handling models and datetimes."""
    return json.dumps(to_jsonable(result), indent=2, default=str, ensure_ascii=False)


def serialize_error(message: str) -> str:
    return json.dumps({"error": message}, ensure_ascii=False)


def text_content(text: str) -> List[Dict[str, Any]]:
    """Wrap text in an MCP content list."""
    return [{"type": "text", "text": text}]


def tool_result(result: Any) -> Dict[str, Any]:
    """MCP ``tools/call`` result for a successful call."""
    return {"content": text_content(serialize_result(result)), "isError": False}


def tool_error(message: str) -> Dict[str, Any]:
    """MCP ``tools/call`` result for a failed call."""
    return {"content": text_content(serialize_error(message)), "isError": True}
