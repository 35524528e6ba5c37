"""MCP Resources - read-only CRM reference data.

- crm://stages: pipeline stages with colors, in display order
- crm://custom-fields: custom field definitions available on leads
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from .exceptions import ResourceNotFound
from .formatting import serialize_result
from .services.crm_service import CRMService

logger = logging.getLogger(__name__)

JSON_MIME_TYPE = "application/json"


@dataclass
class ResourceDefinition:
    uri: str
    name: str
    description: str
    reader: Callable[[], Any]
    mime_type: str = JSON_MIME_TYPE

    def to_mcp_format(self) -> Dict[str, Any]:
        return {
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
            "mimeType": self.mime_type,
        }


class ResourceCatalog:
    """Resources addressable by URI."""

    def __init__(self, resources: List[ResourceDefinition]):
        self._resources = {resource.uri: resource for resource in resources}

    def list_resources(self) -> List[Dict[str, Any]]:
        return [resource.to_mcp_format() for resource in self._resources.values()]

    def get(self, uri: str) -> ResourceDefinition:
        resource = self._resources.get(uri)
        if resource is None:
            raise ResourceNotFound(uri)
        return resource

    def read(self, uri: str) -> str:
        """Read a resource and return its JSON text."""
        resource = self.get(uri)
        logger.debug("Reading resource %s", uri)
        return serialize_result(resource.reader())


def build_resources(service: CRMService) -> ResourceCatalog:
    return ResourceCatalog(
        [
            ResourceDefinition(
                uri="crm://stages",
                name="Pipeline Stages",
                description="All pipeline stages with colors",
                reader=service.list_stages,
            ),
            ResourceDefinition(
                uri="crm://custom-fields",
                name="Custom Field Definitions",
                description="Available custom fields for leads",
                reader=service.list_custom_field_definitions,
            ),
        ]
    )
