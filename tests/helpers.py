"""In-memory CRMBackend double and fixture data for tests."""

from __future__ import annotations

import copy
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from outlet_crm_mcp.backends.protocol import Query
from outlet_crm_mcp.exceptions import BackendError

SELLER_ID = "7d9f5c1e-2b34-4c1a-9a55-0f1e2d3c4b5a"
OTHER_SELLER_ID = "1b2c3d4e-5f60-4718-8293-a4b5c6d7e8f9"
ACTOR_ID = "99999999-8888-4777-8666-555555555555"

STAGE_IDS = {
    "lead": "00000000-0000-4000-8000-000000000001",
    "orcamento": "00000000-0000-4000-8000-000000000002",
    "negociacao": "00000000-0000-4000-8000-000000000003",
    "fechado": "00000000-0000-4000-8000-000000000004",
    "curioso": "00000000-0000-4000-8000-000000000005",
}

LEAD_IDS = {
    "ana": "aaaaaaaa-0000-4000-8000-000000000001",
    "bruno": "aaaaaaaa-0000-4000-8000-000000000002",
    "carla": "aaaaaaaa-0000-4000-8000-000000000003",
}

_BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _ts(minutes: int) -> str:
    return (_BASE_TIME + timedelta(minutes=minutes)).isoformat()


def stage_rows() -> List[Dict[str, Any]]:
    names = {
        "lead": ("Lead", "#3b82f6"),
        "orcamento": ("Orçamento", "#f59e0b"),
        "negociacao": ("Negociação", "#8b5cf6"),
        "fechado": ("Fechado", "#10b981"),
        "curioso": ("Curioso", "#6b7280"),
    }
    return [
        {"id": STAGE_IDS[slug], "slug": slug, "name": name, "color": color, "position": position}
        for position, (slug, (name, color)) in enumerate(names.items())
    ]


def seed_tables() -> Dict[str, List[Dict[str, Any]]]:
    """A small CRM: two leads in 'lead', one in 'fechado'."""
    return {
        "pipeline_stages": stage_rows(),
        "profiles": [
            {"id": SELLER_ID, "full_name": "Marcos Vendedor", "role": "vendedor"},
            {"id": OTHER_SELLER_ID, "full_name": "Paula Gerente", "role": "admin"},
            {"id": ACTOR_ID, "full_name": "Sistema", "role": "admin"},
        ],
        "leads": [
            {
                "id": LEAD_IDS["ana"],
                "name": "Ana",
                "phone": "+55 11 90000-0001",
                "email": "ana@example.com",
                "stage_id": STAGE_IDS["lead"],
                "vendedor_id": SELLER_ID,
                "custom_fields": {"valor_estimado": 100, "tipo_tinta": "acrílica"},
                "notes": None,
                "position": 0,
                "created_at": _ts(0),
            },
            {
                "id": LEAD_IDS["bruno"],
                "name": "Bruno",
                "phone": None,
                "email": None,
                "stage_id": STAGE_IDS["lead"],
                "vendedor_id": OTHER_SELLER_ID,
                "custom_fields": {"valor_estimado": "200"},
                "notes": "Ligar amanhã",
                "position": 1,
                "created_at": _ts(10),
            },
            {
                "id": LEAD_IDS["carla"],
                "name": "Carla",
                "phone": None,
                "email": "carla@example.com",
                "stage_id": STAGE_IDS["fechado"],
                "vendedor_id": SELLER_ID,
                "custom_fields": {},
                "notes": None,
                "position": 0,
                "created_at": _ts(5),
            },
        ],
        "lead_history": [
            {
                "id": "hhhhhhhh-0000-4000-8000-000000000001",
                "lead_id": LEAD_IDS["ana"],
                "change_description": "Lead criado",
                "changed_by": ACTOR_ID,
                "created_at": _ts(0),
            },
            {
                "id": "hhhhhhhh-0000-4000-8000-000000000002",
                "lead_id": LEAD_IDS["ana"],
                "change_description": "Campos atualizados",
                "changed_by": SELLER_ID,
                "created_at": _ts(30),
            },
            {
                "id": "hhhhhhhh-0000-4000-8000-000000000003",
                "lead_id": LEAD_IDS["carla"],
                "change_description": "Movido para Fechado",
                "changed_by": SELLER_ID,
                "created_at": _ts(20),
            },
        ],
        "price_catalog": [
            {
                "id": "cccccccc-0000-4000-8000-000000000001",
                "product_name": "Tinta Acrílica Premium 18L",
                "description": "Acabamento fosco para paredes internas",
                "category": "Acrílica",
                "active": True,
                "price": 389.9,
            },
            {
                "id": "cccccccc-0000-4000-8000-000000000002",
                "product_name": "Esmalte Sintético 3,6L",
                "description": "Brilhante, para metais e madeiras",
                "category": "Esmalte",
                "active": True,
                "price": 129.9,
            },
            {
                "id": "cccccccc-0000-4000-8000-000000000003",
                "product_name": "Tinta Acrílica Econômica 18L",
                "description": "Linha descontinuada",
                "category": "Acrílica",
                "active": False,
                "price": 199.9,
            },
            {
                "id": "cccccccc-0000-4000-8000-000000000004",
                "product_name": "Selador",
                "description": "Preparação de superfície",
                "category": "Acrílica",
                "active": True,
                "price": 89.9,
            },
        ],
        "custom_field_definitions": [
            {"id": "f2", "key": "valor_estimado", "label": "Valor estimado", "type": "number", "position": 1},
            {"id": "f1", "key": "tipo_tinta", "label": "Tipo de tinta", "type": "text", "position": 0},
        ],
    }


class FakeBackend:
    """CRMBackend over plain dicts, recording every call.

    Embeds are resolved through ``Embed.foreign_key``; text search is a
    case-insensitive substring match like PostgREST ``ilike``.
    """

    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables: Dict[str, List[Dict[str, Any]]] = copy.deepcopy(tables) if tables is not None else seed_tables()
        self.calls: List[tuple] = []
        self.failures: Dict[str, str] = {}
        self.before_update: Optional[Callable[[str, Dict[str, Any]], None]] = None
        self.after_select: Optional[Callable[[Query], None]] = None
        self._lock = threading.Lock()
        self._clock = 1000

    # -- helpers -----------------------------------------------------------

    def fail(self, operation: str, message: str) -> None:
        """Make the next and all later ``operation`` calls raise BackendError."""
        self.failures[operation] = message

    def calls_to(self, operation: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == operation]

    def row(self, table: str, row_id: str) -> Optional[Dict[str, Any]]:
        return next((r for r in self.tables.get(table, []) if r.get("id") == row_id), None)

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, *args))
        if operation in self.failures:
            raise BackendError(self.failures[operation], operation=operation)

    @staticmethod
    def _matches(row: Dict[str, Any], filters: Dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in filters.items())

    def _project(self, row: Dict[str, Any], query: Query) -> Dict[str, Any]:
        if query.columns.strip() == "*":
            projected = dict(row)
        else:
            projected = {name.strip(): row.get(name.strip()) for name in query.columns.split(",")}
        for embed in query.embeds:
            related = self.row(embed.table, row.get(embed.foreign_key))
            projected[embed.alias] = {c: related.get(c) for c in embed.columns} if related else None
        return copy.deepcopy(projected)

    # -- CRMBackend --------------------------------------------------------

    def select(self, query: Query) -> List[Dict[str, Any]]:
        self._record("select", query)
        with self._lock:
            rows = [r for r in self.tables.get(query.table, []) if self._matches(r, query.filters)]
            if query.search is not None:
                term = query.search.term.lower()
                rows = [
                    r
                    for r in rows
                    if any(term in str(r.get(column) or "").lower() for column in query.search.columns)
                ]
            if query.order_by:
                column = query.order_by
                rows = sorted(rows, key=lambda r: (r.get(column) is None, r.get(column)), reverse=query.descending)
            if query.limit is not None:
                rows = rows[: query.limit]
            result = [self._project(r, query) for r in rows]
        if self.after_select is not None:
            self.after_select(query)
        return result

    def count(self, table: str, filters: Dict[str, Any]) -> int:
        self._record("count", table, dict(filters))
        with self._lock:
            return sum(1 for r in self.tables.get(table, []) if self._matches(r, filters))

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        self._record("insert", table, copy.deepcopy(values))
        with self._lock:
            self._clock += 1
            row = {"id": str(uuid.uuid4()), "created_at": _ts(self._clock), **copy.deepcopy(values)}
            self.tables.setdefault(table, []).append(row)
            return copy.deepcopy(row)

    def update(self, table: str, values: Dict[str, Any], filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        self._record("update", table, copy.deepcopy(values), dict(filters))
        if self.before_update is not None:
            self.before_update(table, values)
        with self._lock:
            updated = []
            for row in self.tables.get(table, []):
                if self._matches(row, filters):
                    row.update(copy.deepcopy(values))
                    updated.append(copy.deepcopy(row))
            return updated

    @property
    def mutations(self) -> List[tuple]:
        return [call for call in self.calls if call[0] in ("insert", "update")]
