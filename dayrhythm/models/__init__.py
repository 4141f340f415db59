"""
Domain model for DayRhythm.

Plain data records with derived read-only fields. The whole tree hangs off
AppState, which is the unit of persistence.
"""

from dayrhythm.models.app_state import AppState
from dayrhythm.models.base import PlannerModel, utc_now
from dayrhythm.models.config import PlannerConfig, RhythmBudget
from dayrhythm.models.day_plan import DayPlan, day_key, parse_day_key
from dayrhythm.models.enums import (
    DayZone,
    EnergyRhythm,
    FixKind,
    OverloadStatus,
    ReactionRating,
    SpotEffort,
    SpotKind,
    UndoActionKind,
)
from dayrhythm.models.identity import AVATAR_OPTIONS, Identity
from dayrhythm.models.pet_care import CareProduct, PetProfile, PetReaction
from dayrhythm.models.progress import VITALITY_LEVELS, Progress, VitalityLevel, XPReward, level_for
from dayrhythm.models.spot import MIN_SPOT_DURATION_MIN, Spot
from dayrhythm.models.template import SpotTemplate, starter_pack
from dayrhythm.models.undo import UndoRecord
from dayrhythm.models.variant import Variant

__all__ = [
    "AVATAR_OPTIONS",
    "AppState",
    "CareProduct",
    "DayPlan",
    "DayZone",
    "EnergyRhythm",
    "FixKind",
    "Identity",
    "MIN_SPOT_DURATION_MIN",
    "OverloadStatus",
    "PetProfile",
    "PetReaction",
    "PlannerConfig",
    "PlannerModel",
    "Progress",
    "ReactionRating",
    "RhythmBudget",
    "Spot",
    "SpotEffort",
    "SpotKind",
    "SpotTemplate",
    "UndoActionKind",
    "UndoRecord",
    "VITALITY_LEVELS",
    "Variant",
    "VitalityLevel",
    "XPReward",
    "day_key",
    "level_for",
    "parse_day_key",
    "starter_pack",
    "utc_now",
]
