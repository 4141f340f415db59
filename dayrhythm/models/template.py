"""SpotTemplate: a reusable spot blueprint with a usage counter."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import Field

from dayrhythm.models.base import PlannerModel, utc_now
from dayrhythm.models.enums import DayZone, SpotKind
from dayrhythm.models.spot import Spot


class SpotTemplate(PlannerModel):
    """User-managed template. usage_count grows each time it is applied."""

    id: UUID = Field(default_factory=uuid4)
    title: str
    default_duration_min: int
    default_travel_min: int | None = None
    default_buffer_min: int | None = None
    kind: SpotKind = SpotKind.GENERIC
    icon_name: str | None = None
    is_pinned: bool = False
    usage_count: int = 0
    last_used_at: datetime | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def to_spot(self, zone: DayZone = DayZone.DAYTIME, buffer_default: int = 10) -> Spot:
        """Convert the template into a live Spot."""
        return Spot(
            title=self.title,
            kind=self.kind,
            zone=zone,
            duration_min=self.default_duration_min,
            travel_before_min=self.default_travel_min or 0,
            buffer_after_min=(
                self.default_buffer_min
                if self.default_buffer_min is not None
                else buffer_default
            ),
            icon_name=self.icon_name,
            origin_template_id=self.id,
        )


# (title, minutes, kind, icon, pinned)
_STARTER_PACK: list[tuple[str, int, SpotKind, str, bool]] = [
    ("Coffee Break", 20, SpotKind.REST, "cup.and.saucer.fill", True),
    ("Workout", 60, SpotKind.SPORT, "figure.run", True),
    ("Meeting", 90, SpotKind.MEETING, "person.2.fill", True),
    ("Grocery Run", 25, SpotKind.ERRAND, "cart.fill", True),
    ("Walk", 40, SpotKind.SPORT, "figure.walk", True),
    ("Deep Work Block", 120, SpotKind.WORK, "laptopcomputer", True),
    ("Rest & Recharge", 15, SpotKind.REST, "bed.double.fill", True),
    ("Commute", 30, SpotKind.TRAVEL, "car.fill", False),
    ("Quick Call", 15, SpotKind.MEETING, "phone.fill", False),
    ("Cooking", 45, SpotKind.ERRAND, "frying.pan.fill", False),
    ("Reading", 30, SpotKind.REST, "book.fill", False),
    ("Yoga / Stretch", 25, SpotKind.SPORT, "figure.yoga", False),
]


def starter_pack() -> list[SpotTemplate]:
    """Built-in starter templates, with fresh ids on every call."""
    return [
        SpotTemplate(
            title=title,
            default_duration_min=minutes,
            kind=kind,
            icon_name=icon,
            is_pinned=pinned,
        )
        for title, minutes, kind, icon, pinned in _STARTER_PACK
    ]
