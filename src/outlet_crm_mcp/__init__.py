"""Outlet CRM MCP Server.

Model Context Protocol tools for managing CRM leads, pipeline stages and the
paint price catalog, designed for AI agent orchestrators (n8n and others).
Tools are served over stdio, plain HTTP or SSE against a Supabase backend.
"""

from __future__ import annotations

__version__ = "0.3.0"

__all__ = ["__version__"]
