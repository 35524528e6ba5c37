"""Relational backend access for the CRM tools."""

from .factory import get_backend
from .protocol import CRMBackend, Embed, Query, TextSearch

__all__ = ["CRMBackend", "Embed", "Query", "TextSearch", "get_backend"]
