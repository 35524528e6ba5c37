"""CRMBackend Protocol - contract for the relational backend.

Handlers only ever need four operations against the backend: a filtered,
ordered, limited select (optionally with joined rows and a text search),
a count, an insert and an update. The protocol uses structural subtyping
so the Supabase implementation and in-memory test doubles are
interchangeable without inheritance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable


@dataclass(frozen=True)
class Embed:
    """A related row joined onto each result row under ``alias``.

    Attributes:
        alias: Key the related row appears under (e.g. ``stage``)
        table: Related table name (e.g. ``pipeline_stages``)
        columns: Columns selected from the related table
        foreign_key: Column on the parent row that references ``table``
    """

    alias: str
    table: str
    columns: Tuple[str, ...]
    foreign_key: str


@dataclass(frozen=True)
class TextSearch:
    """Case-insensitive substring match of ``term``, OR-combined over ``columns``."""

    term: str
    columns: Tuple[str, ...]


@dataclass(frozen=True)
class Query:
    """A single-table select with equality filters, ordering and limit."""

    table: str
    columns: str = "*"
    embeds: Tuple[Embed, ...] = ()
    filters: Dict[str, Any] = field(default_factory=dict)
    search: Optional[TextSearch] = None
    order_by: Optional[str] = None
    descending: bool = False
    limit: Optional[int] = None


@runtime_checkable
class CRMBackend(Protocol):
    """Protocol defining the backend operations used by the CRM handlers.

    Implementations raise ``BackendError`` for any failure of the underlying
    store, with the store's own message.
    """

    def select(self, query: Query) -> List[Dict[str, Any]]:
        """Run ``query`` and return matching rows (empty list when none)."""
        ...

    def count(self, table: str, filters: Dict[str, Any]) -> int:
        """Count rows in ``table`` matching all equality ``filters``."""
        ...

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored."""
        ...

    def update(self, table: str, values: Dict[str, Any], filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Update rows matching ``filters`` and return them as stored."""
        ...
