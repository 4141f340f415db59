"""
DayPlan: container for one calendar day.

The day key ("YYYY-MM-DD") is the primary lookup key everywhere. It is
derived from the calendar date alone, so it does not depend on locale or
timezone.
"""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID, uuid4

from pydantic import Field

from dayrhythm.lib.exceptions import ValidationError
from dayrhythm.models.base import PlannerModel, utc_now
from dayrhythm.models.enums import EnergyRhythm
from dayrhythm.models.variant import Variant


def day_key(day: date | datetime) -> str:
    """Canonical day key for a date (or the calendar date of a datetime)."""
    if isinstance(day, datetime):
        day = day.date()
    return day.isoformat()


def parse_day_key(key: str) -> date:
    """
    Parse a day key back into a date.

    Raises:
        ValidationError: If the key is not a YYYY-MM-DD calendar date
    """
    try:
        parsed = date.fromisoformat(key)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid day key '{key}': expected YYYY-MM-DD") from e
    if parsed.isoformat() != key:
        raise ValidationError(f"Invalid day key '{key}': expected YYYY-MM-DD")
    return parsed


class DayPlan(PlannerModel):
    """A single day's plan: one or more variants, one of them selected."""

    id: UUID = Field(default_factory=uuid4)
    date_start: date
    day_key: str
    selected_variant_id: UUID | None = None

    variants: list[Variant] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def active_variant(self) -> Variant | None:
        """
        The currently active variant.

        Resolution order: selected id, then the primary-flagged variant,
        then the first variant.
        """
        if self.selected_variant_id is not None:
            selected = self.variant(self.selected_variant_id)
            if selected is not None:
                return selected
        primary = next((v for v in self.variants if v.is_primary), None)
        if primary is not None:
            return primary
        return self.variants[0] if self.variants else None

    def variant(self, variant_id: UUID) -> Variant | None:
        return next((v for v in self.variants if v.id == variant_id), None)

    @classmethod
    def blank(
        cls,
        day: date | datetime,
        rhythm: EnergyRhythm = EnergyRhythm.NORMAL,
    ) -> DayPlan:
        """Create a blank plan seeded with one primary variant named "Main"."""
        if isinstance(day, datetime):
            day = day.date()
        main = Variant(title="Main", rhythm=rhythm, is_primary=True)
        return cls(
            date_start=day,
            day_key=day_key(day),
            selected_variant_id=main.id,
            variants=[main],
        )
