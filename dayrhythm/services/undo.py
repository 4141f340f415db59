"""
Single-slot undo for DayRhythm.

Only the most recent undo-eligible mutation can be reversed. Recording a
new action overwrites the slot whether or not the previous one was used.
There is no redo.

Reversal per action kind:
    add_spot     remove the spot by id
    delete_spot  re-append the pre-delete snapshot
    move_spot    restore the previous zone and sort_index (no renormalization)
    edit_spot    replace the spot with the pre-edit snapshot
    apply_fix    replace the spot with the pre-fix snapshot
"""

from __future__ import annotations

import logging
from uuid import UUID

from dayrhythm.models import DayPlan, Spot, UndoActionKind, UndoRecord, Variant, utc_now

logger = logging.getLogger(__name__)


# =============================================================================
# Record Builders
# =============================================================================


def record_add(day_key: str, variant_id: UUID, spot_id: UUID) -> UndoRecord:
    return UndoRecord(
        action_kind=UndoActionKind.ADD_SPOT,
        day_key=day_key,
        variant_id=variant_id,
        spot_id=spot_id,
    )


def record_delete(day_key: str, variant_id: UUID, spot: Spot) -> UndoRecord:
    return UndoRecord(
        action_kind=UndoActionKind.DELETE_SPOT,
        day_key=day_key,
        variant_id=variant_id,
        spot_id=spot.id,
        previous_spot_snapshot=spot.model_copy(deep=True),
    )


def record_move(day_key: str, variant_id: UUID, spot: Spot) -> UndoRecord:
    """Record a move. Must be called BEFORE the spot's zone/index change."""
    return UndoRecord(
        action_kind=UndoActionKind.MOVE_SPOT,
        day_key=day_key,
        variant_id=variant_id,
        spot_id=spot.id,
        previous_zone=spot.zone,
        previous_sort_index=spot.sort_index,
    )


def record_edit(day_key: str, variant_id: UUID, spot: Spot) -> UndoRecord:
    return UndoRecord(
        action_kind=UndoActionKind.EDIT_SPOT,
        day_key=day_key,
        variant_id=variant_id,
        spot_id=spot.id,
        previous_spot_snapshot=spot.model_copy(deep=True),
    )


def record_fix(day_key: str, variant_id: UUID, spot: Spot) -> UndoRecord:
    return UndoRecord(
        action_kind=UndoActionKind.APPLY_FIX,
        day_key=day_key,
        variant_id=variant_id,
        spot_id=spot.id,
        previous_spot_snapshot=spot.model_copy(deep=True),
    )


# =============================================================================
# Reversal
# =============================================================================


def reverse(record: UndoRecord, plan: DayPlan) -> bool:
    """
    Reverse a recorded action on a day plan, in place.

    Args:
        record: The undo slot contents
        plan: The plan the action was recorded against

    Returns:
        True if the action was reversed. On False nothing was modified.
    """
    if record.variant_id is None:
        logger.debug("Undo record %s has no variant id", record.id)
        return False

    variant = plan.variant(record.variant_id)
    if variant is None:
        logger.debug("Undo target variant %s no longer exists", record.variant_id)
        return False

    handler = _REVERSALS.get(record.action_kind)
    if handler is None or not handler(record, variant):
        return False

    now = utc_now()
    variant.updated_at = now
    plan.updated_at = now
    return True


def _reverse_add(record: UndoRecord, variant: Variant) -> bool:
    if record.spot_id is None:
        return False
    position = variant.spot_position(record.spot_id)
    if position is None:
        return False
    del variant.spots[position]
    return True


def _reverse_delete(record: UndoRecord, variant: Variant) -> bool:
    snapshot = record.previous_spot_snapshot
    if snapshot is None:
        return False
    if variant.spot(snapshot.id) is not None:
        # Re-appending would duplicate the id
        return False
    variant.spots.append(snapshot.model_copy(deep=True))
    return True


def _reverse_move(record: UndoRecord, variant: Variant) -> bool:
    if record.spot_id is None or record.previous_zone is None or record.previous_sort_index is None:
        return False
    spot = variant.spot(record.spot_id)
    if spot is None:
        return False
    spot.zone = record.previous_zone
    spot.sort_index = record.previous_sort_index
    return True


def _reverse_replace(record: UndoRecord, variant: Variant) -> bool:
    snapshot = record.previous_spot_snapshot
    if snapshot is None:
        return False
    position = variant.spot_position(snapshot.id)
    if position is None:
        return False
    variant.spots[position] = snapshot.model_copy(deep=True)
    return True


_REVERSALS = {
    UndoActionKind.ADD_SPOT: _reverse_add,
    UndoActionKind.DELETE_SPOT: _reverse_delete,
    UndoActionKind.MOVE_SPOT: _reverse_move,
    UndoActionKind.EDIT_SPOT: _reverse_replace,
    UndoActionKind.APPLY_FIX: _reverse_replace,
}
