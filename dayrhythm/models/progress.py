"""
Gamification: XP, levels and daily streaks.

Levels are a fixed ten-step XP ladder. Streaks count consecutive calendar
days on which the planner was used, keyed by day key.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import Field

from dayrhythm.lib.exceptions import ValidationError
from dayrhythm.models.base import PlannerModel, utc_now
from dayrhythm.models.day_plan import parse_day_key


@dataclass(frozen=True)
class VitalityLevel:
    """One rung of the XP ladder."""

    level: int
    title: str
    badge: str
    xp_threshold: int


VITALITY_LEVELS: tuple[VitalityLevel, ...] = (
    VitalityLevel(1, "Beginner Breather", "🌱", 0),
    VitalityLevel(2, "Morning Walker", "🌿", 50),
    VitalityLevel(3, "Flow Finder", "🌊", 150),
    VitalityLevel(4, "Rhythm Keeper", "🎵", 350),
    VitalityLevel(5, "Balance Master", "⚖️", 600),
    VitalityLevel(6, "Energy Sage", "🧘", 1000),
    VitalityLevel(7, "Vitality Champion", "🏆", 1500),
    VitalityLevel(8, "Zen Architect", "🏛️", 2500),
    VitalityLevel(9, "Flow Legend", "✨", 4000),
    VitalityLevel(10, "Day Alchemist", "🔮", 6000),
)


def level_for(xp: int) -> VitalityLevel:
    """Highest level whose threshold the XP total has reached."""
    result = VITALITY_LEVELS[0]
    for lvl in VITALITY_LEVELS:
        if xp < lvl.xp_threshold:
            break
        result = lvl
    return result


def _next_level(xp: int) -> VitalityLevel | None:
    return next((lvl for lvl in VITALITY_LEVELS if lvl.xp_threshold > xp), None)


class XPReward:
    """XP reward table."""

    CREATE_DAY_PLAN = 10
    ADD_SPOT = 3
    STAY_WITHIN_BUDGET = 25
    FIX_OVERLOAD = 8
    CREATE_VARIANT = 5
    DAILY_STREAK_BONUS = 15
    FIRST_DRAG_DROP = 5
    COMPLETE_ONBOARDING = 20
    ADD_PET_REACTION = 4


class Progress(PlannerModel):
    """XP, level and streak state."""

    total_xp: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    last_active_day_key: str | None = None
    achieved_milestones: list[str] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def current_level(self) -> VitalityLevel:
        return level_for(self.total_xp)

    @property
    def xp_to_next(self) -> int | None:
        """XP needed to reach the next level (None at max level)."""
        nxt = _next_level(self.total_xp)
        return None if nxt is None else nxt.xp_threshold - self.total_xp

    @property
    def progress_to_next(self) -> float:
        """Fraction (0..1) of the way through the current level."""
        nxt = _next_level(self.total_xp)
        if nxt is None:
            return 1.0
        current = self.current_level
        span = nxt.xp_threshold - current.xp_threshold
        if span <= 0:
            return 1.0
        return (self.total_xp - current.xp_threshold) / span

    def earn_xp(self, amount: int) -> None:
        self.total_xp += amount
        self.updated_at = utc_now()

    def record_active_day(self, day_key: str) -> None:
        """Extend or restart the streak for the given day."""
        if day_key == self.last_active_day_key:
            return

        if self.last_active_day_key is not None and _is_consecutive(
            self.last_active_day_key, day_key
        ):
            self.current_streak += 1
        else:
            # First active day, or the streak was broken
            self.current_streak = 1

        self.longest_streak = max(self.longest_streak, self.current_streak)
        self.last_active_day_key = day_key
        self.updated_at = utc_now()


def _is_consecutive(earlier: str, later: str) -> bool:
    try:
        return (parse_day_key(later) - parse_day_key(earlier)).days == 1
    except ValidationError:
        return False
