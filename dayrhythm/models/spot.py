"""Spot: a single schedulable activity inside a variant."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import Field

from dayrhythm.models.base import PlannerModel, utc_now
from dayrhythm.models.enums import DayZone, SpotEffort, SpotKind

# Minimum duration enforced by the standard edit path (not at construction)
MIN_SPOT_DURATION_MIN = 5


class Spot(PlannerModel):
    """
    A single activity/place in a day plan.

    Load is time only: duration + travel before + buffer after. The effort
    label is cosmetic.
    """

    id: UUID = Field(default_factory=uuid4)
    title: str
    kind: SpotKind = SpotKind.GENERIC
    zone: DayZone = DayZone.DAYTIME
    sort_index: int = 0

    duration_min: int = 30
    travel_before_min: int = 0
    buffer_after_min: int = 0

    effort: SpotEffort = SpotEffort.NORMAL
    note: str = ""
    icon_name: str | None = None
    origin_template_id: UUID | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def computed_load_min(self) -> int:
        """Total load = duration + travel + buffer."""
        return self.duration_min + self.travel_before_min + self.buffer_after_min

    @property
    def display_icon(self) -> str:
        return self.icon_name or self.kind.icon
