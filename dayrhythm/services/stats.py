"""Aggregate statistics across every planned day."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any

from dayrhythm.models import AppState, DayZone, OverloadStatus, SpotKind
from dayrhythm.services.overload_engine import quick_status


@dataclass
class PlannerStats:
    total_days_planned: int
    comfortable_days: int
    tight_days: int
    overloaded_days: int
    average_overload_min: float  # across overloaded days only
    most_used_spot_kind: SpotKind | None
    total_spots_created: int
    favorite_zone: DayZone | None

    @property
    def comfort_rate(self) -> float:
        if self.total_days_planned == 0:
            return 0.0
        return self.comfortable_days / self.total_days_planned

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_days_planned": self.total_days_planned,
            "comfortable_days": self.comfortable_days,
            "tight_days": self.tight_days,
            "overloaded_days": self.overloaded_days,
            "average_overload_min": self.average_overload_min,
            "most_used_spot_kind": self.most_used_spot_kind.value if self.most_used_spot_kind else None,
            "total_spots_created": self.total_spots_created,
            "favorite_zone": self.favorite_zone.value if self.favorite_zone else None,
            "comfort_rate": self.comfort_rate,
        }


def compute_stats(state: AppState) -> PlannerStats:
    """
    Compute planner statistics from each plan's active variant.

    Plans without any variant count toward total_days_planned only.
    Ties for most used kind / favorite zone go to declaration order.
    """
    config = state.config
    status_counts: Counter[OverloadStatus] = Counter()
    total_overload = 0
    kind_counts: Counter[SpotKind] = Counter()
    zone_counts: Counter[DayZone] = Counter()

    for plan in state.day_plans:
        variant = plan.active_variant
        if variant is None:
            continue

        status = quick_status(variant, config)
        status_counts[status] += 1
        if status is OverloadStatus.OVERLOADED:
            total_overload += variant.total_planned_min - config.budget_minutes(variant.rhythm)

        for spot in variant.spots:
            kind_counts[spot.kind] += 1
            zone_counts[spot.zone] += 1

    overloaded = status_counts[OverloadStatus.OVERLOADED]

    return PlannerStats(
        total_days_planned=len(state.day_plans),
        comfortable_days=status_counts[OverloadStatus.COMFORTABLE],
        tight_days=status_counts[OverloadStatus.TIGHT],
        overloaded_days=overloaded,
        average_overload_min=total_overload / overloaded if overloaded else 0.0,
        most_used_spot_kind=_most_common(kind_counts, SpotKind),
        total_spots_created=sum(kind_counts.values()),
        favorite_zone=_most_common(zone_counts, DayZone),
    )


def _most_common(counts: Counter, members) -> Any:
    if not counts:
        return None
    return max(members, key=lambda m: counts[m])
