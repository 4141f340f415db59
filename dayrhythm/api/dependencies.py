"""FastAPI dependencies for the DayRhythm API."""

from __future__ import annotations

from fastapi import Request

from dayrhythm.models import parse_day_key
from dayrhythm.services.state_store import PlannerStore


def get_store(request: Request) -> PlannerStore:
    """The process-wide store, attached to the app at creation."""
    return request.app.state.store


def valid_day_key(day_key: str) -> str:
    """
    Validate the {day_key} path parameter.

    Raises:
        ValidationError: If the key is not YYYY-MM-DD (answered as 400)
    """
    parse_day_key(day_key)
    return day_key
