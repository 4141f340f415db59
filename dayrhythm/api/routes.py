"""
REST API routes for DayRhythm.

A thin layer over PlannerStore and the overload engine for a separate
presentation client. All responses use the envelope from schemas.

Endpoints (all under /api/v1 prefix):
- /health - Health check
- /days/{day_key} - Day plan (created on first access)
- /days/{day_key}/insight - Overload analysis of the active variant
- /days/{day_key}/spots - Spot add / edit / delete / move
- /days/{day_key}/variants - Variant add / delete
- /days/{day_key}/fixes - Apply a fix suggestion
- /days/{day_key}/copy - Copy the plan to another day
- /undo - Undo the last undoable action
- /stats - Aggregate statistics
- /export - Full state document
- /reset - Reset all data
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from dayrhythm.api.dependencies import get_store, valid_day_key
from dayrhythm.api.schemas import (
    DayCopyRequest,
    FixApplyRequest,
    SpotCreateRequest,
    SpotMoveRequest,
    SpotUpdateRequest,
    VariantCreateRequest,
    error_response,
    plan_payload,
    success_response,
)
from dayrhythm.lib.errors import CONFLICT, NOT_FOUND, VALIDATION_ERROR
from dayrhythm.lib.exceptions import ValidationError
from dayrhythm.models import DayZone, Spot, XPReward, parse_day_key
from dayrhythm.services import overload_engine
from dayrhythm.services.state_store import PlannerStore

logger = logging.getLogger(__name__)

FIRST_DRAG_MILESTONE = "first_drag"
FIRST_VARIANT_MILESTONE = "first_variant"

router = APIRouter(prefix="/api/v1")


def _not_found(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=error_response(NOT_FOUND, message))


# =============================================================================
# Health
# =============================================================================


@router.get("/health")
async def health_check() -> dict[str, Any]:
    return success_response({"status": "ok"})


# =============================================================================
# Day Plans
# =============================================================================


@router.get("/days/{day_key}")
async def get_day(
    day_key: str = Depends(valid_day_key),
    store: PlannerStore = Depends(get_store),
) -> dict[str, Any]:
    """Return the plan for a day, creating a blank one if needed."""
    plan = store.ensure_day_plan(parse_day_key(day_key))
    return success_response(plan_payload(plan))


@router.get("/days/{day_key}/insight")
async def get_insight(
    day_key: str = Depends(valid_day_key),
    store: PlannerStore = Depends(get_store),
) -> Any:
    """
    Overload analysis of the day's active variant.

    Returns:
        Envelope with the insight, day and zone budget summaries, and density
    """
    plan = store.ensure_day_plan(parse_day_key(day_key))
    variant = plan.active_variant
    if variant is None:
        return _not_found(f"Day {day_key} has no variant")

    config = store.state.config
    insight = overload_engine.analyze(variant, config)
    density = overload_engine.density_check(variant, config)
    return success_response({
        "insight": insight.to_dict(),
        "day": overload_engine.day_summary(variant, config).to_dict(),
        "zones": {
            zone.value: overload_engine.zone_summary(variant, zone, config).to_dict()
            for zone in DayZone
        },
        "density": {
            "actual": density.actual,
            "recommended": density.recommended,
            "is_exceeded": density.is_exceeded,
            "display_text": density.display_text,
        },
    })


@router.post("/days/{day_key}/copy")
async def copy_day(
    body: DayCopyRequest,
    day_key: str = Depends(valid_day_key),
    store: PlannerStore = Depends(get_store),
) -> Any:
    copy = store.copy_day_plan(day_key, body.to_day)
    if copy is None:
        return _not_found(f"No plan for {day_key}")
    logger.info("Copied day plan %s to %s", day_key, copy.day_key)
    return success_response(plan_payload(copy))


# =============================================================================
# Spots
# =============================================================================


@router.post("/days/{day_key}/spots", status_code=status.HTTP_201_CREATED)
async def add_spot(
    body: SpotCreateRequest,
    day_key: str = Depends(valid_day_key),
    store: PlannerStore = Depends(get_store),
) -> Any:
    """Add a spot (custom or from a template) to the active variant."""
    store.ensure_day_plan(parse_day_key(day_key))

    if body.template_id is not None:
        spot = store.add_spot_from_template(day_key, body.template_id, body.zone)
        if spot is None:
            return _not_found(f"Template {body.template_id} not found")
    else:
        title = body.title.strip()
        if not title:
            raise ValidationError("Spot title must not be empty")
        config = store.state.config
        spot = store.add_spot(day_key, Spot(
            title=title,
            kind=body.kind,
            zone=body.zone,
            duration_min=body.duration_min,
            travel_before_min=(
                body.travel_before_min
                if body.travel_before_min is not None
                else config.default_travel_min
            ),
            buffer_after_min=(
                body.buffer_after_min
                if body.buffer_after_min is not None
                else config.default_buffer_between_min
            ),
            effort=body.effort,
            note=body.note,
            icon_name=body.icon_name,
        ))
        if spot is None:
            return _not_found(f"Day {day_key} has no active variant")

    store.earn_xp(XPReward.ADD_SPOT)
    return success_response(spot.model_dump(mode="json"))


@router.patch("/days/{day_key}/spots/{spot_id}")
async def update_spot(
    spot_id: UUID,
    body: SpotUpdateRequest,
    day_key: str = Depends(valid_day_key),
    store: PlannerStore = Depends(get_store),
) -> Any:
    # Explicit nulls mean "leave unchanged"
    changes = body.model_dump(exclude_unset=True, exclude_none=True)

    def apply(spot: Spot) -> None:
        for name, value in changes.items():
            setattr(spot, name, value)

    spot = store.update_spot(day_key, spot_id, apply)
    if spot is None:
        return _not_found(f"Spot {spot_id} not found")
    return success_response(spot.model_dump(mode="json"))


@router.delete("/days/{day_key}/spots/{spot_id}")
async def delete_spot(
    spot_id: UUID,
    day_key: str = Depends(valid_day_key),
    store: PlannerStore = Depends(get_store),
) -> Any:
    if not store.delete_spot(day_key, spot_id):
        return _not_found(f"Spot {spot_id} not found")
    return success_response({"deleted": str(spot_id), "can_undo": store.can_undo})


@router.post("/days/{day_key}/spots/{spot_id}/move")
async def move_spot(
    spot_id: UUID,
    body: SpotMoveRequest,
    day_key: str = Depends(valid_day_key),
    store: PlannerStore = Depends(get_store),
) -> Any:
    if not store.move_spot(day_key, spot_id, body.to_zone, body.to_index):
        return _not_found(f"Spot {spot_id} not found")

    if store.record_milestone(FIRST_DRAG_MILESTONE):
        store.earn_xp(XPReward.FIRST_DRAG_DROP)

    plan = store.state.day_plan(day_key)
    return success_response(plan_payload(plan))


# =============================================================================
# Variants
# =============================================================================


@router.post("/days/{day_key}/variants", status_code=status.HTTP_201_CREATED)
async def add_variant(
    body: VariantCreateRequest,
    day_key: str = Depends(valid_day_key),
    store: PlannerStore = Depends(get_store),
) -> Any:
    variant = store.add_variant(day_key, body.title, body.copy_from_variant_id)
    if variant is None:
        return _not_found(f"Cannot add a variant to {day_key}")

    store.earn_xp(XPReward.CREATE_VARIANT)
    store.record_milestone(FIRST_VARIANT_MILESTONE)
    return success_response(variant.model_dump(mode="json"))


@router.delete("/days/{day_key}/variants/{variant_id}")
async def delete_variant(
    variant_id: UUID,
    day_key: str = Depends(valid_day_key),
    store: PlannerStore = Depends(get_store),
) -> Any:
    plan = store.state.day_plan(day_key)
    if plan is None or plan.variant(variant_id) is None:
        return _not_found(f"Variant {variant_id} not found")
    if not store.delete_variant(day_key, variant_id):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=error_response(CONFLICT, "A day plan must keep at least one variant"),
        )
    return success_response(plan_payload(store.state.day_plan(day_key)))


# =============================================================================
# Fixes
# =============================================================================


@router.post("/days/{day_key}/fixes")
async def apply_fix(
    body: FixApplyRequest,
    day_key: str = Depends(valid_day_key),
    store: PlannerStore = Depends(get_store),
) -> Any:
    """Apply one of the suggestions the current insight offers for the day."""
    plan = store.state.day_plan(day_key)
    variant = plan.active_variant if plan else None
    if variant is None:
        return _not_found(f"No plan for {day_key}")

    suggestions = overload_engine.analyze(variant, store.state.config).suggestions
    if body.index >= len(suggestions):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_response(
                VALIDATION_ERROR,
                f"Suggestion index {body.index} out of range ({len(suggestions)} available)",
            ),
        )

    suggestion = suggestions[body.index]
    updated = store.apply_suggestion(day_key, suggestion)
    if updated is None:
        return _not_found("Suggestion target no longer exists")

    store.earn_xp(XPReward.FIX_OVERLOAD)
    return success_response({
        "applied": suggestion.to_dict(),
        "variant": updated.model_dump(mode="json"),
        "can_undo": store.can_undo,
    })


# =============================================================================
# Undo, Stats, Export, Reset
# =============================================================================


@router.post("/undo")
async def undo(store: PlannerStore = Depends(get_store)) -> dict[str, Any]:
    return success_response({"undone": store.undo_last_action()})


@router.get("/stats")
async def stats(store: PlannerStore = Depends(get_store)) -> dict[str, Any]:
    data = store.compute_stats().to_dict()
    progress = store.state.progress
    level = progress.current_level
    data["progress"] = {
        "total_xp": progress.total_xp,
        "level": level.level,
        "level_title": level.title,
        "xp_to_next": progress.xp_to_next,
        "current_streak": progress.current_streak,
        "longest_streak": progress.longest_streak,
    }
    data["file_size"] = store.file_size_formatted
    return success_response(data)


@router.get("/export")
async def export(store: PlannerStore = Depends(get_store)) -> Response:
    """The full state document, in the on-disk format."""
    return Response(content=store.export_json(), media_type="application/json")


@router.post("/reset")
async def reset(store: PlannerStore = Depends(get_store)) -> dict[str, Any]:
    store.reset_all_data()
    return success_response({"reset": True})
