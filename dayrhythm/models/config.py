"""
PlannerConfig: app-wide planner tunables.

Per-rhythm values (total budget minutes and recommended spot count) live
in a single lookup table keyed by EnergyRhythm, so every caller reads the
same row instead of re-deriving it with its own conditional.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import Field

from dayrhythm.models.base import PlannerModel, utc_now
from dayrhythm.models.enums import DayZone, EnergyRhythm


class RhythmBudget(PlannerModel):
    """Budget row for one rhythm."""

    budget_minutes: int
    recommended_spots: int


def default_rhythm_table() -> dict[EnergyRhythm, RhythmBudget]:
    return {
        EnergyRhythm.LIGHT: RhythmBudget(budget_minutes=300, recommended_spots=4),
        EnergyRhythm.NORMAL: RhythmBudget(budget_minutes=420, recommended_spots=6),
        EnergyRhythm.INTENSE: RhythmBudget(budget_minutes=540, recommended_spots=8),
    }


class PlannerConfig(PlannerModel):
    """
    Global planner configuration. Singleton within AppState.

    Zone shares are percentages that are expected to sum to 100 across the
    three zones; this is not enforced.
    """

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    default_rhythm: EnergyRhythm = EnergyRhythm.NORMAL

    # Buffers
    default_buffer_between_min: int = 10  # 0 / 5 / 10 / 15
    default_travel_min: int = 0  # 0 / 10 / 20

    # Minutes over budget before a day counts as overloaded / tight
    overload_threshold_min: int = 15
    tight_threshold_min: int = 5

    zone_share_morning_percent: int = 30
    zone_share_daytime_percent: int = 45
    zone_share_evening_percent: int = 25

    # UX toggles
    show_overload_banner: bool = True
    enable_undo_toasts: bool = True

    rhythm_table: dict[EnergyRhythm, RhythmBudget] = Field(
        default_factory=default_rhythm_table
    )

    @classmethod
    def with_budgets(
        cls,
        light: int | None = None,
        normal: int | None = None,
        intense: int | None = None,
        **kwargs,
    ) -> PlannerConfig:
        """Build a config overriding budget minutes for selected rhythms."""
        config = cls(**kwargs)
        overrides = {
            EnergyRhythm.LIGHT: light,
            EnergyRhythm.NORMAL: normal,
            EnergyRhythm.INTENSE: intense,
        }
        for rhythm, minutes in overrides.items():
            if minutes is not None:
                config.rhythm_table[rhythm].budget_minutes = minutes
        return config

    def _row(self, rhythm: EnergyRhythm) -> RhythmBudget:
        row = self.rhythm_table.get(rhythm)
        if row is None:
            # A hand-edited state file may drop a row; fall back to defaults
            row = default_rhythm_table()[rhythm]
        return row

    def budget_minutes(self, rhythm: EnergyRhythm) -> int:
        return self._row(rhythm).budget_minutes

    def recommended_spots(self, rhythm: EnergyRhythm) -> int:
        return self._row(rhythm).recommended_spots

    def zone_share(self, zone: DayZone) -> int:
        """Percentage of the daily budget allocated to a zone."""
        return {
            DayZone.MORNING: self.zone_share_morning_percent,
            DayZone.DAYTIME: self.zone_share_daytime_percent,
            DayZone.EVENING: self.zone_share_evening_percent,
        }[zone]

    def zone_budget(self, rhythm: EnergyRhythm, zone: DayZone) -> int:
        """Zone budget in minutes (integer floor of total * share / 100)."""
        return (self.budget_minutes(rhythm) * self.zone_share(zone)) // 100
