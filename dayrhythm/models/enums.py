"""
Enumerations shared by the domain model and the overload engine.

Declaration order matters: the overload engine breaks ties between zones
by the order of DayZone members (morning < daytime < evening).
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class EnergyRhythm(StrEnum):
    """The three intensity modes a day can be planned in."""

    LIGHT = "light"
    NORMAL = "normal"
    INTENSE = "intense"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class DayZone(StrEnum):
    """Morning / Daytime / Evening."""

    MORNING = "morning"
    DAYTIME = "daytime"
    EVENING = "evening"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class SpotKind(StrEnum):
    """Type of activity."""

    GENERIC = "generic"
    WORK = "work"
    MEETING = "meeting"
    SPORT = "sport"
    ERRAND = "errand"
    REST = "rest"
    TRAVEL = "travel"

    @property
    def label(self) -> str:
        return "General" if self is SpotKind.GENERIC else self.value.capitalize()

    @property
    def icon(self) -> str:
        return _KIND_ICONS[self]


_KIND_ICONS: dict[SpotKind, str] = {
    SpotKind.GENERIC: "circle.fill",
    SpotKind.WORK: "laptopcomputer",
    SpotKind.MEETING: "person.2.fill",
    SpotKind.SPORT: "figure.run",
    SpotKind.ERRAND: "cart.fill",
    SpotKind.REST: "cup.and.saucer.fill",
    SpotKind.TRAVEL: "car.fill",
}


class SpotEffort(StrEnum):
    """User-labeled effort. Cosmetic only, does NOT affect load."""

    LIGHT = "light"
    NORMAL = "normal"
    HEAVY = "heavy"


class OverloadStatus(StrEnum):
    """Classification of planned minutes against a budget."""

    COMFORTABLE = "comfortable"
    TIGHT = "tight"
    OVERLOADED = "overloaded"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS: dict[OverloadStatus, str] = {
    OverloadStatus.COMFORTABLE: "Comfortable",
    OverloadStatus.TIGHT: "Getting Tight",
    OverloadStatus.OVERLOADED: "Overloaded",
}


class FixKind(StrEnum):
    """Types of overload fix suggestions."""

    COMPRESS = "compress"
    MOVE_ZONE = "move_zone"
    INSERT_BREAK = "insert_break"
    REMOVE_SPOT = "remove_spot"
    CREATE_VARIANT = "create_variant"


class UndoActionKind(StrEnum):
    """Mutations that can be reversed by the single-slot undo log."""

    ADD_SPOT = "add_spot"
    MOVE_SPOT = "move_spot"
    EDIT_SPOT = "edit_spot"
    DELETE_SPOT = "delete_spot"
    APPLY_FIX = "apply_fix"


class ReactionRating(IntEnum):
    """How a pet reacted to a care product (1 = terrible, 5 = excellent)."""

    TERRIBLE = 1
    BAD = 2
    NEUTRAL = 3
    GOOD = 4
    EXCELLENT = 5
