"""CRM operations behind the MCP tools.

Each public method is one tool: it runs one or a few sequential backend
calls and shapes the result. Nothing here locks or retries. The
multi-step methods (stage lookup then update, read-merge-write of custom
fields, count-then-insert) are not atomic; concurrent calls on the same
lead or stage can interleave, and the backend provides no guarantee
against it.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional, Union

from ..backends.protocol import CRMBackend, Embed, Query, TextSearch
from ..exceptions import LeadNotFound, StageNotFound
from ..models import LeadMutationResult, StageStats

logger = logging.getLogger(__name__)

DEFAULT_STAGE_SLUG = "lead"
UNKNOWN_STAGE = "unknown"
ESTIMATED_VALUE_FIELD = "valor_estimado"

LEADS = "leads"
STAGES = "pipeline_stages"
PROFILES = "profiles"
HISTORY = "lead_history"
CATALOG = "price_catalog"
FIELD_DEFINITIONS = "custom_field_definitions"

STAGE_EMBED = Embed("stage", STAGES, ("name", "slug", "color"), "stage_id")
SELLER_EMBED = Embed("vendedor", PROFILES, ("full_name", "role"), "vendedor_id")
ACTOR_EMBED = Embed("changed_by", PROFILES, ("full_name",), "changed_by")

CATALOG_SEARCH_COLUMNS = ("product_name", "description", "category")

Number = Union[int, float]


def coerce_number(value: Any) -> Number:
    """Interpret a custom-field value as a number; anything else counts as 0.

    >>> coerce_number("200"), coerce_number(1.5), coerce_number("n/a"), coerce_number(None)
    (200, 1.5, 0, 0)
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        number: Number = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return 0
    else:
        return 0
    if isinstance(number, float) and not math.isfinite(number):
        return 0
    return number


def _normalize_total(total: Number) -> Number:
    if isinstance(total, float) and total.is_integer():
        return int(total)
    return total


class CRMService:
    """The CRM tool handlers, bound to one backend.

    Args:
        backend: any object satisfying ``CRMBackend``
    """

    def __init__(self, backend: CRMBackend):
        self.backend = backend

    # ------------------------------------------------------------------
    # Stage lookup
    # ------------------------------------------------------------------

    def find_stage(self, slug: str) -> Optional[Dict[str, Any]]:
        """Return the stage with ``slug`` or ``None``."""
        rows = self.backend.select(Query(table=STAGES, columns="id, name, slug", filters={"slug": slug}, limit=1))
        return rows[0] if rows else None

    def resolve_stage(self, slug: str) -> Dict[str, Any]:
        """Return the stage with ``slug``.

        Raises:
            StageNotFound: no stage has that slug
        """
        stage = self.find_stage(slug)
        if stage is None:
            raise StageNotFound(slug)
        return stage

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    def get_leads(
        self,
        stage_slug: Optional[str] = None,
        vendedor_id: Optional[str] = None,
        limit: int = 50,
    ) -> List[Dict[str, Any]]:
        """Leads newest first, joined with their stage and seller.

        An unknown ``stage_slug`` drops the stage filter instead of failing.
        """
        filters: Dict[str, Any] = {}
        if stage_slug:
            stage = self.find_stage(stage_slug)
            if stage is not None:
                filters["stage_id"] = stage["id"]
            else:
                logger.warning("Stage '%s' not found; returning leads without stage filter", stage_slug)
        if vendedor_id:
            filters["vendedor_id"] = vendedor_id

        return self.backend.select(
            Query(
                table=LEADS,
                embeds=(STAGE_EMBED, SELLER_EMBED),
                filters=filters,
                order_by="created_at",
                descending=True,
                limit=limit,
            )
        )

    def update_lead_stage(self, lead_id: str, new_stage_slug: str) -> LeadMutationResult:
        stage = self.resolve_stage(new_stage_slug)

        updated = self.backend.update(LEADS, {"stage_id": stage["id"]}, {"id": lead_id})
        if not updated:
            raise LeadNotFound(lead_id)

        rows = self.backend.select(
            Query(
                table=LEADS,
                embeds=(Embed("stage", STAGES, ("name", "slug"), "stage_id"),),
                filters={"id": lead_id},
                limit=1,
            )
        )
        lead = rows[0] if rows else updated[0]
        logger.info("Lead %s moved to stage %s", lead_id, stage.get("slug", new_stage_slug))
        return LeadMutationResult(message=f"Lead moved to {stage['name']}", lead=lead)

    def update_lead_custom_fields(self, lead_id: str, custom_fields: Dict[str, Any]) -> LeadMutationResult:
        """Shallow-merge ``custom_fields`` into the lead's existing mapping."""
        rows = self.backend.select(Query(table=LEADS, columns="id, custom_fields", filters={"id": lead_id}, limit=1))
        if not rows:
            raise LeadNotFound(lead_id)

        merged = dict(rows[0].get("custom_fields") or {})
        merged.update(custom_fields)

        updated = self.backend.update(LEADS, {"custom_fields": merged}, {"id": lead_id})
        if not updated:
            # Deleted between the read and the write
            raise LeadNotFound(lead_id)
        return LeadMutationResult(message="Custom fields updated", lead=updated[0])

    def create_lead(
        self,
        name: str,
        vendedor_id: str,
        stage_slug: str = DEFAULT_STAGE_SLUG,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        custom_fields: Optional[Dict[str, Any]] = None,
        notes: Optional[str] = None,
    ) -> LeadMutationResult:
        """Insert a lead at the end of its stage (position = current stage size)."""
        stage = self.resolve_stage(stage_slug or DEFAULT_STAGE_SLUG)
        position = self.backend.count(LEADS, {"stage_id": stage["id"]})

        values: Dict[str, Any] = {
            "name": name,
            "stage_id": stage["id"],
            "vendedor_id": vendedor_id,
            "custom_fields": custom_fields or {},
            "position": position,
        }
        for key, value in (("phone", phone), ("email", email), ("notes", notes)):
            if value is not None:
                values[key] = value

        lead = self.backend.insert(LEADS, values)
        logger.info("Created lead %s in stage %s at position %d", lead.get("id"), stage_slug, position)
        return LeadMutationResult(message=f'Lead "{name}" created successfully', lead=lead)

    def search_price_catalog(
        self,
        query: str,
        category: Optional[str] = None,
        limit: int = 10,
    ) -> List[Dict[str, Any]]:
        """Active catalog entries matching ``query`` in name, description or category."""
        filters: Dict[str, Any] = {"active": True}
        if category:
            filters["category"] = category
        term = query.strip()
        search = TextSearch(term, CATALOG_SEARCH_COLUMNS) if term else None
        return self.backend.select(Query(table=CATALOG, filters=filters, search=search, limit=limit))

    def get_lead_history(self, lead_id: str) -> List[Dict[str, Any]]:
        return self.backend.select(
            Query(
                table=HISTORY,
                embeds=(ACTOR_EMBED,),
                filters={"lead_id": lead_id},
                order_by="created_at",
                descending=True,
            )
        )

    def get_pipeline_stats(self) -> Dict[str, StageStats]:
        """Lead count and summed ``valor_estimado`` per stage slug."""
        rows = self.backend.select(
            Query(
                table=LEADS,
                columns="stage_id, custom_fields",
                embeds=(Embed("stage", STAGES, ("name", "slug", "color", "position"), "stage_id"),),
            )
        )

        stats: Dict[str, StageStats] = {}
        for row in rows:
            stage = row.get("stage") or {}
            slug = stage.get("slug") or UNKNOWN_STAGE
            bucket = stats.get(slug)
            if bucket is None:
                bucket = stats[slug] = StageStats(stage_name=stage.get("name"))
            bucket.count += 1
            fields = row.get("custom_fields") or {}
            if isinstance(fields, dict):
                bucket.total_value += coerce_number(fields.get(ESTIMATED_VALUE_FIELD))

        for bucket in stats.values():
            bucket.total_value = _normalize_total(bucket.total_value)
        return stats

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def list_stages(self) -> List[Dict[str, Any]]:
        return self.backend.select(Query(table=STAGES, order_by="position"))

    def list_custom_field_definitions(self) -> List[Dict[str, Any]]:
        return self.backend.select(Query(table=FIELD_DEFINITIONS, order_by="position"))
