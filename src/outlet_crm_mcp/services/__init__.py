"""Service layer: CRM operations bound to an injected backend."""

from .crm_service import CRMService

__all__ = ["CRMService"]
