"""
Overload Engine for DayRhythm.

Pure, stateless budget math over a Variant and a PlannerConfig:
- Status classification (comfortable / tight / overloaded)
- Day and zone budget summaries
- Full analysis with heuristic fix suggestions
- Applying a suggestion to a copy of a variant
- Density, overhead breakdown, top spots, and variant comparison

No function here mutates its inputs, performs I/O, or touches the store.
Callers commit results back through PlannerStore themselves.

Zone-level checks use HALF the day-level thresholds: one zone moderately
over its slice reads as "tight" sooner than the whole day would.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from dayrhythm.models import (
    DayZone,
    FixKind,
    OverloadStatus,
    PlannerConfig,
    Spot,
    SpotEffort,
    SpotKind,
    Variant,
    utc_now,
)

ZONES: tuple[DayZone, ...] = tuple(DayZone)

# Suggestion priorities (higher = shown first)
PRIORITY_COMPRESS = 80
PRIORITY_MOVE_ZONE = 70
PRIORITY_INSERT_BREAK = 50
PRIORITY_REMOVE_SPOT = 40
PRIORITY_CREATE_VARIANT = 30

# Heuristic constants
COMPRESS_MAX_CANDIDATES = 2
COMPRESS_MIN_DURATION = 20  # only spots longer than this are compressed
COMPRESS_MAX_REDUCTION = 15
COMPRESS_FLOOR = 10  # suggested reduction keeps at least this much duration
APPLY_COMPRESS_FLOOR = 5
BREAK_DURATION_MIN = 15
REMOVE_SPOT_SLACK = 2  # spot count may exceed the recommendation by this much
BREAK_TITLE = "Rest & Recharge"
BREAK_ICON = "bed.double.fill"


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class BudgetSummary:
    """Budget usage of a whole day or of one zone."""

    planned_min: int
    budget_min: int
    delta_min: int  # over budget, clamped to >= 0
    remaining_min: int  # room left, clamped to >= 0
    status: OverloadStatus
    usage_percent: float  # planned / budget, unclamped (can exceed 1.0)

    @property
    def is_over_budget(self) -> bool:
        return self.delta_min > 0

    @property
    def display_text(self) -> str:
        if self.delta_min > 0:
            return f"Overloaded by +{self.delta_min} min"
        if self.remaining_min > 0:
            return f"{self.remaining_min} min remaining"
        return "Right at the limit"

    def to_dict(self) -> dict[str, Any]:
        return {
            "planned_min": self.planned_min,
            "budget_min": self.budget_min,
            "delta_min": self.delta_min,
            "remaining_min": self.remaining_min,
            "status": self.status.value,
            "usage_percent": self.usage_percent,
            "display_text": self.display_text,
        }


@dataclass
class FixSuggestion:
    """
    An engine-produced recommendation to de-overload a variant.

    Ephemeral: never persisted, regenerated on every analysis.
    """

    kind: FixKind
    title: str
    delta_min: int  # expected overload reduction in minutes
    target_spot_id: UUID | None = None
    target_zone: DayZone | None = None
    priority: int = 50  # 0..100
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "kind": self.kind.value,
            "title": self.title,
            "delta_min": self.delta_min,
            "target_spot_id": str(self.target_spot_id) if self.target_spot_id else None,
            "target_zone": self.target_zone.value if self.target_zone else None,
            "priority": self.priority,
        }


@dataclass
class Insight:
    """Result of one full analysis pass over a variant."""

    variant_id: UUID
    status: OverloadStatus
    overload_delta_min: int  # planned - budget (signed)
    tight_delta_min: int  # max(0, delta - tight threshold)
    recommended_spots: int
    actual_spots: int
    buffer_total_min: int
    travel_total_min: int
    duration_total_min: int
    primary_over_zone: DayZone | None
    zone_deltas: dict[DayZone, int]
    suggestions: list[FixSuggestion] = field(default_factory=list)
    computed_at: datetime = field(default_factory=utc_now)

    def zone_delta(self, zone: DayZone) -> int:
        return self.zone_deltas.get(zone, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "variant_id": str(self.variant_id),
            "computed_at": self.computed_at.isoformat(),
            "status": self.status.value,
            "overload_delta_min": self.overload_delta_min,
            "tight_delta_min": self.tight_delta_min,
            "recommended_spots": self.recommended_spots,
            "actual_spots": self.actual_spots,
            "buffer_total_min": self.buffer_total_min,
            "travel_total_min": self.travel_total_min,
            "duration_total_min": self.duration_total_min,
            "primary_over_zone": self.primary_over_zone.value if self.primary_over_zone else None,
            "zone_deltas": {zone.value: delta for zone, delta in self.zone_deltas.items()},
            "suggestions": [s.to_dict() for s in self.suggestions],
        }


@dataclass
class DensityWarning:
    """Spot count against the recommendation for the variant's rhythm."""

    actual: int
    recommended: int
    is_exceeded: bool

    @property
    def display_text(self) -> str | None:
        if not self.is_exceeded:
            return None
        return f"{self.actual} spots, {self.recommended} recommended for this mode"


@dataclass
class OverheadBreakdown:
    """Where the minutes go: activities vs buffers vs travel."""

    duration_min: int
    buffer_min: int
    travel_min: int
    total_min: int

    def _share(self, part: int) -> float:
        return part / self.total_min if self.total_min > 0 else 0.0

    @property
    def duration_percent(self) -> float:
        return self._share(self.duration_min)

    @property
    def buffer_percent(self) -> float:
        return self._share(self.buffer_min)

    @property
    def travel_percent(self) -> float:
        return self._share(self.travel_min)


@dataclass
class SpotLoadEntry:
    id: UUID
    title: str
    load_min: int
    kind: SpotKind
    zone: DayZone


@dataclass
class VariantSnapshot:
    id: UUID
    title: str
    total_min: int
    spot_count: int
    status: OverloadStatus
    morning_min: int
    daytime_min: int
    evening_min: int


@dataclass
class VariantComparison:
    """
    Title-level diff between two variants of the same day.

    Spots are matched by title string equality, not identity. Two unrelated
    spots sharing a title are treated as the same spot.
    """

    variant_a: VariantSnapshot
    variant_b: VariantSnapshot
    added_spots: list[str]  # titles in B but not A
    removed_spots: list[str]  # titles in A but not B
    moved_spots: list[str]  # same title, different zone
    compressed_spots: list[str]  # same title, shorter duration in B


# =============================================================================
# Status Classification
# =============================================================================


def compute_status(
    delta: int,
    tight_threshold: int,
    overload_threshold: int,
) -> OverloadStatus:
    """
    Classify minutes over budget.

    Comparisons are strict: a delta exactly at a threshold does not cross it.
    """
    if delta > overload_threshold:
        return OverloadStatus.OVERLOADED
    if delta > tight_threshold:
        return OverloadStatus.TIGHT
    return OverloadStatus.COMFORTABLE


def quick_status(variant: Variant, config: PlannerConfig) -> OverloadStatus:
    """Day-level status without suggestion generation."""
    delta = variant.total_planned_min - config.budget_minutes(variant.rhythm)
    return compute_status(
        delta,
        tight_threshold=config.tight_threshold_min,
        overload_threshold=config.overload_threshold_min,
    )


def zone_status(variant: Variant, zone: DayZone, config: PlannerConfig) -> OverloadStatus:
    """Zone-level status, using half the day thresholds."""
    delta = variant.planned_min_in(zone) - config.zone_budget(variant.rhythm, zone)
    return compute_status(
        delta,
        tight_threshold=config.tight_threshold_min // 2,
        overload_threshold=config.overload_threshold_min // 2,
    )


# =============================================================================
# Budget Summaries
# =============================================================================


def _summary(planned: int, budget: int, status: OverloadStatus) -> BudgetSummary:
    return BudgetSummary(
        planned_min=planned,
        budget_min=budget,
        delta_min=max(0, planned - budget),
        remaining_min=max(0, budget - planned),
        status=status,
        usage_percent=planned / budget if budget > 0 else 0.0,
    )


def day_summary(variant: Variant, config: PlannerConfig) -> BudgetSummary:
    return _summary(
        variant.total_planned_min,
        config.budget_minutes(variant.rhythm),
        quick_status(variant, config),
    )


def zone_summary(variant: Variant, zone: DayZone, config: PlannerConfig) -> BudgetSummary:
    return _summary(
        variant.planned_min_in(zone),
        config.zone_budget(variant.rhythm, zone),
        zone_status(variant, zone, config),
    )


# =============================================================================
# Full Analysis
# =============================================================================


def analyze(variant: Variant, config: PlannerConfig) -> Insight:
    """
    Compute the full overload insight for a variant.

    Suggestions are generated only when the day is tight or overloaded.
    """
    rhythm = variant.rhythm
    total_delta = variant.total_planned_min - config.budget_minutes(rhythm)

    zone_deltas = {
        zone: variant.planned_min_in(zone) - config.zone_budget(rhythm, zone)
        for zone in ZONES
    }

    status = compute_status(
        total_delta,
        tight_threshold=config.tight_threshold_min,
        overload_threshold=config.overload_threshold_min,
    )

    over_zones = [zone for zone in ZONES if zone_deltas[zone] > 0]
    primary_over_zone = max(over_zones, key=lambda z: zone_deltas[z]) if over_zones else None

    recommended = config.recommended_spots(rhythm)

    suggestions: list[FixSuggestion] = []
    if status is not OverloadStatus.COMFORTABLE:
        suggestions = build_suggestions(
            variant,
            config,
            total_delta=total_delta,
            zone_deltas=zone_deltas,
            recommended_spots=recommended,
        )

    return Insight(
        variant_id=variant.id,
        status=status,
        overload_delta_min=total_delta,
        tight_delta_min=max(0, total_delta - config.tight_threshold_min),
        recommended_spots=recommended,
        actual_spots=variant.spot_count,
        buffer_total_min=sum(s.buffer_after_min for s in variant.spots),
        travel_total_min=sum(s.travel_before_min for s in variant.spots),
        duration_total_min=sum(s.duration_min for s in variant.spots),
        primary_over_zone=primary_over_zone,
        zone_deltas=zone_deltas,
        suggestions=suggestions,
    )


def build_suggestions(
    variant: Variant,
    config: PlannerConfig,
    total_delta: int,
    zone_deltas: dict[DayZone, int],
    recommended_spots: int,
) -> list[FixSuggestion]:
    """
    Build fix suggestions from local heuristics, in five ordered steps.

    1. Compress up to two long non-rest spots (priority 80)
    2. Move the lightest spot out of the worst zone (priority 70)
    3. Insert one break into an over-budget zone without rest (priority 50)
    4. Remove the shortest non-rest spot when far over the count (priority 40)
    5. Offer a lighter variant when overloaded (priority 30)

    Returns:
        Suggestions sorted by priority descending (stable for equal priority)
    """
    suggestions: list[FixSuggestion] = []
    # Stable sort: equal loads keep their list order
    by_load = sorted(variant.spots, key=lambda s: s.computed_load_min, reverse=True)

    # 1. Compress
    compress_candidates = [
        s for s in by_load
        if s.kind is not SpotKind.REST and s.duration_min > COMPRESS_MIN_DURATION
    ][:COMPRESS_MAX_CANDIDATES]
    for spot in compress_candidates:
        reduction = min(COMPRESS_MAX_REDUCTION, spot.duration_min - COMPRESS_FLOOR)
        if reduction <= 0:
            continue
        suggestions.append(FixSuggestion(
            kind=FixKind.COMPRESS,
            title=f'Compress "{spot.title}" by {reduction} min',
            delta_min=reduction,
            target_spot_id=spot.id,
            priority=PRIORITY_COMPRESS,
        ))

    # 2. Move zone
    worst_zone = max(ZONES, key=lambda z: zone_deltas[z])
    if zone_deltas[worst_zone] > 0:
        target_zone = least_loaded_zone(worst_zone, zone_deltas)
        move_candidates = sorted(
            (s for s in variant.spots_in(worst_zone) if s.kind is not SpotKind.REST),
            key=lambda s: s.computed_load_min,
        )
        if move_candidates:
            candidate = move_candidates[0]
            suggestions.append(FixSuggestion(
                kind=FixKind.MOVE_ZONE,
                title=f'Move "{candidate.title}" to {target_zone.label}',
                delta_min=candidate.computed_load_min,
                target_spot_id=candidate.id,
                target_zone=target_zone,
                priority=PRIORITY_MOVE_ZONE,
            ))

    # 3. Insert break (at most one)
    for zone in ZONES:
        if zone_deltas[zone] <= 0:
            continue
        if any(s.kind is SpotKind.REST for s in variant.spots_in(zone)):
            continue
        suggestions.append(FixSuggestion(
            kind=FixKind.INSERT_BREAK,
            title=f"Add {BREAK_DURATION_MIN} min break in {zone.label}",
            delta_min=0,  # a break makes the plan realistic, it does not shrink it
            target_zone=zone,
            priority=PRIORITY_INSERT_BREAK,
        ))
        break

    # 4. Remove spot
    if variant.spot_count > recommended_spots + REMOVE_SPOT_SLACK:
        removable = [s for s in by_load if s.kind is not SpotKind.REST]
        if removable:
            candidate = removable[-1]  # shortest
            suggestions.append(FixSuggestion(
                kind=FixKind.REMOVE_SPOT,
                title=f'Remove "{candidate.title}" ({candidate.computed_load_min} min)',
                delta_min=candidate.computed_load_min,
                target_spot_id=candidate.id,
                priority=PRIORITY_REMOVE_SPOT,
            ))

    # 5. Create variant
    if total_delta > config.overload_threshold_min:
        suggestions.append(FixSuggestion(
            kind=FixKind.CREATE_VARIANT,
            title="Create a lighter variant",
            delta_min=0,
            priority=PRIORITY_CREATE_VARIANT,
        ))

    return sorted(suggestions, key=lambda s: s.priority, reverse=True)


def least_loaded_zone(excluding: DayZone, zone_deltas: dict[DayZone, int]) -> DayZone:
    """Zone with the smallest delta other than `excluding` (ties: declaration order)."""
    candidates = [zone for zone in ZONES if zone != excluding]
    if not candidates:
        return DayZone.EVENING
    return min(candidates, key=lambda z: zone_deltas.get(z, 0))


# =============================================================================
# Apply Suggestion
# =============================================================================


def apply_suggestion(
    suggestion: FixSuggestion,
    variant: Variant,
    config: PlannerConfig,
) -> Variant:
    """
    Apply a fix suggestion to a copy of the variant.

    create_variant is a no-op here: variant creation belongs to the store.

    Returns:
        The modified copy (the input variant is untouched)
    """
    result = variant.model_copy(deep=True)
    now = utc_now()

    if suggestion.kind is FixKind.COMPRESS:
        spot = result.spot(suggestion.target_spot_id) if suggestion.target_spot_id else None
        if spot is not None:
            reduction = min(suggestion.delta_min, spot.duration_min - APPLY_COMPRESS_FLOOR)
            spot.duration_min -= max(0, reduction)
            spot.updated_at = now

    elif suggestion.kind is FixKind.MOVE_ZONE:
        spot = result.spot(suggestion.target_spot_id) if suggestion.target_spot_id else None
        if spot is not None and suggestion.target_zone is not None:
            spot.zone = suggestion.target_zone
            spot.sort_index = result.next_sort_index(suggestion.target_zone, exclude=spot.id)
            spot.updated_at = now

    elif suggestion.kind is FixKind.INSERT_BREAK:
        target_zone = suggestion.target_zone or DayZone.DAYTIME
        result.spots.append(Spot(
            title=BREAK_TITLE,
            kind=SpotKind.REST,
            zone=target_zone,
            sort_index=result.next_sort_index(target_zone),
            duration_min=BREAK_DURATION_MIN,
            travel_before_min=0,
            buffer_after_min=0,
            effort=SpotEffort.LIGHT,
            icon_name=BREAK_ICON,
        ))

    elif suggestion.kind is FixKind.REMOVE_SPOT:
        if suggestion.target_spot_id is not None:
            result.spots = [s for s in result.spots if s.id != suggestion.target_spot_id]

    # FixKind.CREATE_VARIANT: handled by the store

    result.updated_at = now
    return result


# =============================================================================
# Density, Overhead, Top Spots
# =============================================================================


def density_check(variant: Variant, config: PlannerConfig) -> DensityWarning:
    recommended = config.recommended_spots(variant.rhythm)
    actual = variant.spot_count
    return DensityWarning(
        actual=actual,
        recommended=recommended,
        is_exceeded=actual > recommended,
    )


def overhead_breakdown(variant: Variant) -> OverheadBreakdown:
    duration = sum(s.duration_min for s in variant.spots)
    buffer = sum(s.buffer_after_min for s in variant.spots)
    travel = sum(s.travel_before_min for s in variant.spots)
    return OverheadBreakdown(
        duration_min=duration,
        buffer_min=buffer,
        travel_min=travel,
        total_min=duration + buffer + travel,
    )


def top_spots_by_load(variant: Variant, limit: int = 6) -> list[SpotLoadEntry]:
    by_load = sorted(variant.spots, key=lambda s: s.computed_load_min, reverse=True)
    return [
        SpotLoadEntry(
            id=s.id,
            title=s.title,
            load_min=s.computed_load_min,
            kind=s.kind,
            zone=s.zone,
        )
        for s in by_load[:limit]
    ]


# =============================================================================
# Variant Comparison
# =============================================================================


def _snapshot(variant: Variant, config: PlannerConfig) -> VariantSnapshot:
    return VariantSnapshot(
        id=variant.id,
        title=variant.title,
        total_min=variant.total_planned_min,
        spot_count=variant.spot_count,
        status=quick_status(variant, config),
        morning_min=variant.planned_min_in(DayZone.MORNING),
        daytime_min=variant.planned_min_in(DayZone.DAYTIME),
        evening_min=variant.planned_min_in(DayZone.EVENING),
    )


def compare_variants(a: Variant, b: Variant, config: PlannerConfig) -> VariantComparison:
    """
    Compare two variants of the same day by spot title.

    When several spots share a title, the first one in each variant is used.
    """
    titles_a = {s.title for s in a.spots}
    titles_b = {s.title for s in b.spots}

    moved: list[str] = []
    compressed: list[str] = []
    for title in titles_a & titles_b:
        spot_a = next(s for s in a.spots if s.title == title)
        spot_b = next(s for s in b.spots if s.title == title)
        if spot_a.zone != spot_b.zone:
            moved.append(title)
        if spot_b.duration_min < spot_a.duration_min:
            compressed.append(title)

    return VariantComparison(
        variant_a=_snapshot(a, config),
        variant_b=_snapshot(b, config),
        added_spots=sorted(titles_b - titles_a),
        removed_spots=sorted(titles_a - titles_b),
        moved_spots=sorted(moved),
        compressed_spots=sorted(compressed),
    )
