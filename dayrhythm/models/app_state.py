"""AppState: the root aggregate and the unit of persistence."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from dayrhythm.models.base import PlannerModel
from dayrhythm.models.config import PlannerConfig
from dayrhythm.models.day_plan import DayPlan
from dayrhythm.models.identity import Identity
from dayrhythm.models.pet_care import CareProduct, PetProfile, PetReaction
from dayrhythm.models.progress import Progress
from dayrhythm.models.template import SpotTemplate, starter_pack
from dayrhythm.models.undo import UndoRecord


class AppState(PlannerModel):
    """Everything that is persisted, in one tree."""

    config: PlannerConfig = Field(default_factory=PlannerConfig)
    day_plans: list[DayPlan] = Field(default_factory=list)
    templates: list[SpotTemplate] = Field(default_factory=starter_pack)
    progress: Progress = Field(default_factory=Progress)
    identity: Identity = Field(default_factory=Identity)

    # Single undo slot: a new undo-eligible mutation overwrites it
    last_action: UndoRecord | None = None

    pet_profiles: list[PetProfile] = Field(default_factory=list)
    care_products: list[CareProduct] = Field(default_factory=list)
    pet_reactions: list[PetReaction] = Field(default_factory=list)

    has_completed_onboarding: bool = False

    def day_plan(self, day_key: str) -> DayPlan | None:
        return next((p for p in self.day_plans if p.day_key == day_key), None)

    def template(self, template_id: UUID) -> SpotTemplate | None:
        return next((t for t in self.templates if t.id == template_id), None)
