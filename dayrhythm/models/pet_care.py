"""
Pet-care reaction log.

Secondary feature: pets, care products, and how each pet reacted to a
product. Deleting a pet or a product removes its reactions.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import Field

from dayrhythm.models.base import PlannerModel, utc_now
from dayrhythm.models.enums import ReactionRating


class PetProfile(PlannerModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    species: str  # "Dog", "Cat", "Rabbit", ...
    emoji: str = "🐾"
    created_at: datetime = Field(default_factory=utc_now)


class CareProduct(PlannerModel):
    id: UUID = Field(default_factory=uuid4)
    name: str  # "Shampoo X", "Flea drops Y"
    category: str = ""  # "Shampoo", "Spray", "Drops", "Cream"
    brand: str = ""
    created_at: datetime = Field(default_factory=utc_now)


class PetReaction(PlannerModel):
    id: UUID = Field(default_factory=uuid4)
    pet_id: UUID
    product_id: UUID
    rating: ReactionRating
    notes: str = ""
    date_recorded: datetime = Field(default_factory=utc_now)
