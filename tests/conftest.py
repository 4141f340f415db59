"""
Shared test fixtures for DayRhythm.

This module provides common fixtures used across all test modules:
- A temp-file state path and a PlannerStore bound to it
- A default PlannerConfig
- Spot / variant builders

Usage:
    All fixtures are automatically available to any test in the tests/ directory.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from dayrhythm.models import DayZone, EnergyRhythm, PlannerConfig, Spot, SpotKind, Variant
from dayrhythm.services.state_store import PlannerStore

# ---------------------------------------------------------------------------
# 1. Store on a temp file
# ---------------------------------------------------------------------------


@pytest.fixture()
def state_path(tmp_path):
    """Location of the state document for one test."""
    return tmp_path / "day_rhythm.json"


@pytest.fixture()
def store(state_path):
    """
    Provide a PlannerStore writing to a temp file.

    The writer is flushed and stopped after the test finishes.
    """
    planner_store = PlannerStore(state_path)
    yield planner_store
    planner_store.close()


# ---------------------------------------------------------------------------
# 2. Config
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> PlannerConfig:
    """Default config: normal budget 420, thresholds 15 / 5, shares 30/45/25."""
    return PlannerConfig()


# ---------------------------------------------------------------------------
# 3. Builders
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_spot() -> Callable[..., Spot]:
    """
    Build a spot with zero travel and buffer unless given.

    Example usage in a test::

        def test_load(make_spot):
            spot = make_spot("Gym", 60, buffer=10)
            assert spot.computed_load_min == 70
    """

    def _make(
        title: str = "Spot",
        duration: int = 30,
        *,
        travel: int = 0,
        buffer: int = 0,
        zone: DayZone = DayZone.DAYTIME,
        kind: SpotKind = SpotKind.GENERIC,
        sort_index: int = 0,
    ) -> Spot:
        return Spot(
            title=title,
            duration_min=duration,
            travel_before_min=travel,
            buffer_after_min=buffer,
            zone=zone,
            kind=kind,
            sort_index=sort_index,
        )

    return _make


@pytest.fixture()
def make_variant() -> Callable[..., Variant]:
    """Build a variant from spots (rhythm defaults to normal)."""

    def _make(*spots: Spot, rhythm: EnergyRhythm = EnergyRhythm.NORMAL, title: str = "Main") -> Variant:
        return Variant(title=title, rhythm=rhythm, spots=list(spots))

    return _make
