"""
Pydantic schemas and the response envelope for the DayRhythm REST API.

Every response body has the shape:
    {"success": bool, "data": Any, "error": dict | None, "meta": {"timestamp": str}}
"""

from __future__ import annotations

from datetime import date
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from dayrhythm.lib.errors import build_error_response
from dayrhythm.models import DayPlan, DayZone, SpotEffort, SpotKind, utc_now

# =============================================================================
# Response Envelope
# =============================================================================


def _meta() -> dict[str, Any]:
    return {"timestamp": utc_now().isoformat()}


def success_response(data: Any) -> dict[str, Any]:
    return {"success": True, "data": data, "error": None, "meta": _meta()}


def error_response(
    code: str,
    message: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return {
        "success": False,
        "data": None,
        "error": build_error_response(code, message, details),
        "meta": _meta(),
    }


def plan_payload(plan: DayPlan) -> dict[str, Any]:
    """JSON form of a day plan, with the resolved active variant id."""
    payload = plan.model_dump(mode="json")
    active = plan.active_variant
    payload["active_variant_id"] = str(active.id) if active else None
    return payload


# =============================================================================
# Request Models
# =============================================================================


class SpotCreateRequest(BaseModel):
    """
    Validated input for adding a spot.

    With template_id set, the spot is built from that template and only
    zone is used from the request. Travel and buffer default to the
    planner config when omitted.
    """

    title: str = Field(default="", max_length=200)
    kind: SpotKind = SpotKind.GENERIC
    zone: DayZone = DayZone.DAYTIME
    duration_min: int = Field(default=30, ge=1, le=1440)
    travel_before_min: int | None = Field(default=None, ge=0, le=1440)
    buffer_after_min: int | None = Field(default=None, ge=0, le=1440)
    effort: SpotEffort = SpotEffort.NORMAL
    note: str = Field(default="", max_length=2000)
    icon_name: str | None = Field(default=None, max_length=100)
    template_id: UUID | None = None


class SpotUpdateRequest(BaseModel):
    """Partial spot edit. Zone changes go through the move endpoint."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    kind: SpotKind | None = None
    duration_min: int | None = Field(default=None, ge=0, le=1440)
    travel_before_min: int | None = Field(default=None, ge=0, le=1440)
    buffer_after_min: int | None = Field(default=None, ge=0, le=1440)
    effort: SpotEffort | None = None
    note: str | None = Field(default=None, max_length=2000)
    icon_name: str | None = Field(default=None, max_length=100)


class SpotMoveRequest(BaseModel):
    to_zone: DayZone
    to_index: int = Field(default=0, ge=0)


class VariantCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    copy_from_variant_id: UUID | None = None


class FixApplyRequest(BaseModel):
    """Index into the suggestions of the day's current insight."""

    index: int = Field(..., ge=0)


class DayCopyRequest(BaseModel):
    to_day: date
