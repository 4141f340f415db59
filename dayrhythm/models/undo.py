"""UndoRecord: the contents of the single undo slot."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import Field

from dayrhythm.models.base import PlannerModel, utc_now
from dayrhythm.models.enums import DayZone, UndoActionKind
from dayrhythm.models.spot import Spot


class UndoRecord(PlannerModel):
    """
    Enough information to reverse one undo-eligible mutation.

    Which fields are required depends on action_kind:
        add_spot     spot_id
        delete_spot  previous_spot_snapshot
        move_spot    spot_id, previous_zone, previous_sort_index
        edit_spot    previous_spot_snapshot
        apply_fix    previous_spot_snapshot
    """

    id: UUID = Field(default_factory=uuid4)
    action_kind: UndoActionKind
    day_key: str
    variant_id: UUID | None = None
    spot_id: UUID | None = None
    previous_spot_snapshot: Spot | None = None
    previous_zone: DayZone | None = None
    previous_sort_index: int | None = None
    created_at: datetime = Field(default_factory=utc_now)
