"""Variant: one candidate schedule for a day."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import Field

from dayrhythm.models.base import PlannerModel, utc_now
from dayrhythm.models.enums import DayZone, EnergyRhythm
from dayrhythm.models.spot import Spot


class Variant(PlannerModel):
    """
    A variant of a day plan.

    The rhythm selects which budget table row applies. Spots are kept in
    one list; order within a zone is defined by Spot.sort_index.
    """

    id: UUID = Field(default_factory=uuid4)
    title: str = "Main"
    rhythm: EnergyRhythm = EnergyRhythm.NORMAL
    is_primary: bool = True

    spots: list[Spot] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def total_planned_min(self) -> int:
        return sum(spot.computed_load_min for spot in self.spots)

    @property
    def spot_count(self) -> int:
        return len(self.spots)

    def spots_in(self, zone: DayZone) -> list[Spot]:
        """Spots of a zone, ordered by sort_index ascending."""
        return sorted(
            (spot for spot in self.spots if spot.zone == zone),
            key=lambda spot: spot.sort_index,
        )

    def planned_min_in(self, zone: DayZone) -> int:
        return sum(spot.computed_load_min for spot in self.spots_in(zone))

    def spot_count_in(self, zone: DayZone) -> int:
        return len(self.spots_in(zone))

    def next_sort_index(self, zone: DayZone, exclude: UUID | None = None) -> int:
        """Index that appends a spot at the end of a zone."""
        indices = [
            spot.sort_index
            for spot in self.spots
            if spot.zone == zone and spot.id != exclude
        ]
        return max(indices, default=-1) + 1

    def spot(self, spot_id: UUID) -> Spot | None:
        return next((spot for spot in self.spots if spot.id == spot_id), None)

    def spot_position(self, spot_id: UUID) -> int | None:
        """List position of a spot, or None if it is not in this variant."""
        for idx, spot in enumerate(self.spots):
            if spot.id == spot_id:
                return idx
        return None
