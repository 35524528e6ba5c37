"""Supabase implementation of the CRMBackend protocol.

Wraps one long-lived ``supabase.Client`` (PostgREST under the hood) and
translates ``Query`` objects into PostgREST builder chains. Every client
failure surfaces as ``BackendError`` carrying the backend's message.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from postgrest.exceptions import APIError
from supabase import Client, create_client

from ..exceptions import BackendError
from .protocol import Embed, Query, TextSearch

logger = logging.getLogger(__name__)


def render_columns(columns: str, embeds: tuple[Embed, ...]) -> str:
    """Render a column list with embedded relations in PostgREST syntax.

    >>> render_columns("*", (Embed("stage", "pipeline_stages", ("name", "slug"), "stage_id"),))
    '*, stage:pipeline_stages(name, slug)'
    """
    parts = [columns] if columns else []
    for embed in embeds:
        parts.append(f"{embed.alias}:{embed.table}({', '.join(embed.columns)})")
    return ", ".join(parts)


def _quote_filter_value(value: str) -> str:
    # Double quotes keep reserved characters (, . : ( )) from being parsed as
    # PostgREST filter syntax
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_search(search: TextSearch) -> str:
    """Render a ``TextSearch`` as the argument of a PostgREST ``or`` filter."""
    pattern = _quote_filter_value(f"*{search.term}*")
    return ",".join(f"{column}.ilike.{pattern}" for column in search.columns)


class SupabaseBackend:
    """CRMBackend backed by a Supabase project."""

    def __init__(self, client: Client):
        self._client = client

    @classmethod
    def from_credentials(cls, url: str, service_key: str) -> "SupabaseBackend":
        """Create the backend with a privileged (service role) client."""
        logger.info("Connecting to Supabase at %s", url)
        return cls(create_client(url, service_key))

    @property
    def client(self) -> Client:
        return self._client

    def select(self, query: Query) -> List[Dict[str, Any]]:
        builder = self._client.table(query.table).select(render_columns(query.columns, query.embeds))
        for column, value in query.filters.items():
            builder = builder.eq(column, value)
        if query.search is not None:
            builder = builder.or_(render_search(query.search))
        if query.order_by:
            builder = builder.order(query.order_by, desc=query.descending)
        if query.limit is not None:
            builder = builder.limit(query.limit)
        response = self._execute(builder, f"select {query.table}")
        return list(response.data or [])

    def count(self, table: str, filters: Dict[str, Any]) -> int:
        builder = self._client.table(table).select("id", count="exact", head=True)
        for column, value in filters.items():
            builder = builder.eq(column, value)
        response = self._execute(builder, f"count {table}")
        return response.count or 0

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        response = self._execute(self._client.table(table).insert(values), f"insert {table}")
        if not response.data:
            raise BackendError(f"Insert into {table} returned no row", operation=f"insert {table}")
        return response.data[0]

    def update(self, table: str, values: Dict[str, Any], filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        builder = self._client.table(table).update(values)
        for column, value in filters.items():
            builder = builder.eq(column, value)
        response = self._execute(builder, f"update {table}")
        return list(response.data or [])

    def _execute(self, builder: Any, operation: str) -> Any:
        try:
            return builder.execute()
        except APIError as e:
            logger.warning("Supabase %s failed: %s", operation, e.message)
            raise BackendError(e.message or str(e), operation=operation) from e
        except Exception as e:
            logger.warning("Supabase %s failed: %s", operation, e)
            raise BackendError(str(e), operation=operation) from e
