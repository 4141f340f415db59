"""Identity: the user's profile card."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from dayrhythm.models.base import PlannerModel, utc_now

# Available emoji avatars grouped by category
AVATAR_OPTIONS: dict[str, list[str]] = {
    "Faces": ["😊", "😎", "🤓", "🧘", "💪", "🌟", "🦊", "🐱"],
    "Nature": ["🌻", "🌿", "🍀", "🌸", "🌊", "⛰️", "🌅", "🔥"],
    "Symbols": ["⚡", "💎", "🎯", "🏆", "✨", "🦋", "🕊️", "🎭"],
}


class Identity(PlannerModel):
    avatar_emoji: str = "😊"
    display_name: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
