"""Pydantic plumbing for tool input models.

Each tool declares its arguments as a ``ToolInput`` subclass (see
``outlet_crm_mcp.models.inputs``). The same model produces the JSON Schema
advertised in ``tools/list`` and validates incoming arguments before the
handler runs.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Dict, Optional, Type, get_args
from uuid import UUID

import pydantic
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    ValidationInfo,
    WithJsonSchema,
    field_validator,
    model_validator,
)
from pydantic.json_schema import GenerateJsonSchema
from pydantic_core import PydanticCustomError

from ..exceptions import ValidationError

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# pydantic error type prefix -> JSON Schema type name
_JSON_TYPES = {
    "string": "string",
    "int": "integer",
    "float": "number",
    "bool": "boolean",
    "dict": "object",
}


def _check_email(value: str) -> str:
    if not _EMAIL_PATTERN.match(value):
        raise PydanticCustomError("email_format", "Input should be a valid email address")
    return value


Email = Annotated[
    str,
    AfterValidator(_check_email),
    WithJsonSchema({"type": "string", "format": "email"}),
]


class ToolInput(BaseModel):
    """Base model for tool arguments.

    Unknown keys are dropped and nulls count as absent. Integer fields take
    neither booleans nor strings. UUID fields accept any textual form the
    ``uuid`` module parses.
    """

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @field_validator("*", mode="before")
    @classmethod
    def _strict_integers(cls, value: Any, info: ValidationInfo) -> Any:
        # bool is a subclass of int and lax mode parses numeric strings;
        # integral floats (10.0) still convert
        if cls.model_fields[info.field_name].annotation is int and isinstance(value, (bool, str)):
            raise PydanticCustomError("int_type", "Input should be a valid integer")
        return value

    @field_validator("*", mode="before")
    @classmethod
    def _uuid_spellings(cls, value: Any, info: ValidationInfo) -> Any:
        # braced and urn:uuid: forms; malformed text is left to pydantic
        annotation = cls.model_fields[info.field_name].annotation
        if isinstance(value, str) and UUID in (annotation, *get_args(annotation)):
            try:
                return UUID(value)
            except ValueError:
                return value
        return value


class ToolInputJsonSchema(GenerateJsonSchema):
    """Schema generator for ``inputSchema``: optional fields are simply not required."""

    def nullable_schema(self, schema):
        return self.generate_inner(schema["schema"])

    def default_schema(self, schema):
        json_schema = super().default_schema(schema)
        if "default" in json_schema and json_schema["default"] is None:
            del json_schema["default"]
        return json_schema

    def field_title_should_be_set(self, schema) -> bool:
        return False


def input_schema(model: Type[ToolInput]) -> Dict[str, Any]:
    """JSON Schema object for an input model, as used by MCP ``tools/list``."""
    schema = model.model_json_schema(schema_generator=ToolInputJsonSchema)
    schema.pop("title", None)
    schema.pop("description", None)
    schema.setdefault("properties", {})
    return schema


def _constraint(error: Dict[str, Any]) -> str:
    error_type = error["type"]
    if error_type == "missing":
        return "required"
    if error_type.startswith("uuid"):
        return "format:uuid"
    if error_type == "email_format":
        return "format:email"
    if error_type == "greater_than_equal":
        return f"minimum:{error['ctx']['ge']}"
    if error_type == "int_from_float":
        return "type:integer"
    prefix = error_type.split("_", 1)[0]
    if error_type.endswith(("_type", "_parsing")) and prefix in _JSON_TYPES:
        return f"type:{_JSON_TYPES[prefix]}"
    return error_type


def validate_arguments(model: Type[ToolInput], arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Validate ``arguments`` against ``model`` and return handler keyword arguments.

    Defaults are applied, absent optional fields are left out and UUIDs are
    passed on in canonical form.

    Raises:
        ValidationError: naming the first offending field and constraint
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise ValidationError("arguments", "type:object", "Tool arguments must be a JSON object")

    try:
        parsed = model.model_validate(arguments)
    except pydantic.ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "arguments"
        constraint = _constraint(error)
        message = f"Missing required argument '{field}'" if constraint == "required" else None
        raise ValidationError(field, constraint, message) from e

    return {
        name: str(value) if isinstance(value, UUID) else value
        for name, value in parsed
        if value is not None
    }
