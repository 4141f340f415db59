"""
Base model for all persisted DayRhythm records.

Every record is a pydantic model so the whole AppState tree can be
validated on load and dumped to JSON on save. Records are plain data;
behavior is limited to derived read-only properties.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(UTC)


class PlannerModel(BaseModel):
    """Base class for persisted records."""

    # Unknown keys from older state files are dropped, not rejected.
    # Assignments are validated so a snapshot never holds a value the
    # decoder would reject on the next load.
    model_config = ConfigDict(extra="ignore", validate_assignment=True)
