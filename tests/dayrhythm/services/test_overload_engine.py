"""
Tests for the overload engine.

Default config used throughout: normal budget 420 min, thresholds 15 / 5,
zone shares 30/45/25 (zone budgets 126 / 189 / 105, zone thresholds 7 / 2).

Covers:
- Status classification and the strict threshold boundaries
- Zone thresholds at half the day thresholds
- Budget summaries
- Suggestion heuristics, tie-breaks and ordering
- apply_suggestion for every fix kind
- Density, overhead, top spots, variant comparison
"""

from __future__ import annotations

import json

import pytest

from dayrhythm.models import (
    DayZone,
    EnergyRhythm,
    FixKind,
    OverloadStatus,
    PlannerConfig,
    SpotEffort,
    SpotKind,
)
from dayrhythm.services.overload_engine import (
    FixSuggestion,
    analyze,
    apply_suggestion,
    compare_variants,
    compute_status,
    day_summary,
    density_check,
    least_loaded_zone,
    overhead_breakdown,
    quick_status,
    top_spots_by_load,
    zone_status,
    zone_summary,
)

# =============================================================================
# Status Classification
# =============================================================================


class TestComputeStatus:
    """compute_status uses strict comparisons."""

    @pytest.mark.parametrize(
        ("delta", "expected"),
        [
            (-100, OverloadStatus.COMFORTABLE),
            (0, OverloadStatus.COMFORTABLE),
            (5, OverloadStatus.COMFORTABLE),
            (6, OverloadStatus.TIGHT),
            (15, OverloadStatus.TIGHT),
            (16, OverloadStatus.OVERLOADED),
        ],
    )
    def test_boundaries(self, delta: int, expected: OverloadStatus) -> None:
        assert compute_status(delta, tight_threshold=5, overload_threshold=15) is expected


class TestQuickStatus:
    def test_exactly_at_tight_threshold_is_comfortable(self, make_spot, make_variant, config) -> None:
        """delta == tight threshold is NOT tight."""
        variant = make_variant(make_spot("A", 425))
        assert quick_status(variant, config) is OverloadStatus.COMFORTABLE

    def test_one_over_tight_threshold_is_tight(self, make_spot, make_variant, config) -> None:
        variant = make_variant(make_spot("A", 426))
        assert quick_status(variant, config) is OverloadStatus.TIGHT

    def test_rhythm_selects_budget(self, make_spot, make_variant, config) -> None:
        """450 min is overloaded on a light day but comfortable on an intense one."""
        spot = make_spot("A", 450)
        assert quick_status(make_variant(spot, rhythm=EnergyRhythm.LIGHT), config) is OverloadStatus.OVERLOADED
        assert quick_status(make_variant(spot, rhythm=EnergyRhythm.INTENSE), config) is OverloadStatus.COMFORTABLE

    def test_load_includes_travel_and_buffer(self, make_spot, make_variant, config) -> None:
        variant = make_variant(make_spot("A", 400, travel=10, buffer=10))
        assert variant.total_planned_min == 420
        assert quick_status(variant, config) is OverloadStatus.COMFORTABLE


class TestZoneStatus:
    """Zone checks use half the day thresholds (floor division)."""

    def test_zone_overloaded_at_half_the_day_delta(self, make_spot, make_variant, config) -> None:
        # Morning budget 126; 134 is 8 over, above the zone overload threshold of 7
        zone_variant = make_variant(make_spot("M", 134, zone=DayZone.MORNING))
        assert zone_status(zone_variant, DayZone.MORNING, config) is OverloadStatus.OVERLOADED

        # The same 8 min over at day level is only tight
        day_variant = make_variant(make_spot("D", 428))
        assert quick_status(day_variant, config) is OverloadStatus.TIGHT

    def test_odd_threshold_is_floored(self, make_spot, make_variant, config) -> None:
        # 15 // 2 == 7: a zone delta of 7 is tight, 8 is overloaded
        seven_over = make_variant(make_spot("M", 133, zone=DayZone.MORNING))
        assert zone_status(seven_over, DayZone.MORNING, config) is OverloadStatus.TIGHT

    def test_zone_tight_above_half_tight_threshold(self, make_spot, make_variant, config) -> None:
        # 5 // 2 == 2: evening budget 105, 107 is comfortable, 108 is tight
        assert zone_status(
            make_variant(make_spot("E", 107, zone=DayZone.EVENING)), DayZone.EVENING, config
        ) is OverloadStatus.COMFORTABLE
        assert zone_status(
            make_variant(make_spot("E", 108, zone=DayZone.EVENING)), DayZone.EVENING, config
        ) is OverloadStatus.TIGHT

    def test_other_zones_do_not_count(self, make_spot, make_variant, config) -> None:
        variant = make_variant(make_spot("D", 400, zone=DayZone.DAYTIME))
        assert zone_status(variant, DayZone.MORNING, config) is OverloadStatus.COMFORTABLE


# =============================================================================
# Budget Summaries
# =============================================================================


class TestBudgetSummary:
    @pytest.mark.parametrize("minutes", [0, 100, 419, 420, 421, 450, 900])
    def test_delta_is_clamped_overage(self, make_spot, make_variant, config, minutes: int) -> None:
        variant = make_variant(make_spot("A", minutes))
        summary = day_summary(variant, config)
        assert summary.delta_min == max(0, minutes - 420)
        assert summary.remaining_min == max(0, 420 - minutes)
        assert summary.budget_min == 420
        assert summary.planned_min == minutes

    def test_usage_percent_is_unclamped(self, make_spot, make_variant, config) -> None:
        summary = day_summary(make_variant(make_spot("A", 630)), config)
        assert summary.usage_percent == pytest.approx(1.5)
        assert summary.is_over_budget is True
        assert summary.display_text == "Overloaded by +210 min"

    def test_zero_budget_usage_is_zero(self, make_spot, make_variant) -> None:
        config = PlannerConfig.with_budgets(normal=0)
        summary = day_summary(make_variant(make_spot("A", 30)), config)
        assert summary.usage_percent == 0.0
        assert summary.delta_min == 30

    def test_remaining_display_text(self, make_spot, make_variant, config) -> None:
        summary = day_summary(make_variant(make_spot("A", 400)), config)
        assert summary.display_text == "20 min remaining"
        assert day_summary(make_variant(make_spot("A", 420)), config).display_text == "Right at the limit"

    def test_zone_summary(self, make_spot, make_variant, config) -> None:
        variant = make_variant(
            make_spot("A", 100, zone=DayZone.DAYTIME),
            make_spot("B", 100, zone=DayZone.DAYTIME),
            make_spot("C", 50, zone=DayZone.MORNING),
        )
        summary = zone_summary(variant, DayZone.DAYTIME, config)
        assert summary.budget_min == 189
        assert summary.planned_min == 200
        assert summary.delta_min == 11
        assert summary.status is OverloadStatus.OVERLOADED

    def test_to_dict(self, make_spot, make_variant, config) -> None:
        data = day_summary(make_variant(make_spot("A", 450)), config).to_dict()
        assert data["status"] == "overloaded"
        assert data["delta_min"] == 30


# =============================================================================
# Analyze
# =============================================================================


class TestAnalyze:
    def test_empty_variant(self, make_variant, config) -> None:
        insight = analyze(make_variant(), config)
        assert insight.status is OverloadStatus.COMFORTABLE
        assert insight.suggestions == []
        assert insight.actual_spots == 0
        assert insight.overload_delta_min == -420
        assert insight.primary_over_zone is None

    def test_comfortable_day_has_no_suggestions(self, make_spot, make_variant, config) -> None:
        variant = make_variant(make_spot("A", 300), make_spot("B", 125))
        insight = analyze(variant, config)
        assert insight.status is OverloadStatus.COMFORTABLE
        assert insight.suggestions == []

    def test_overloaded_day_scenario(self, make_spot, make_variant, config) -> None:
        """450 planned vs 420 budget: overloaded with compress and create-variant."""
        variant = make_variant(
            make_spot("Deep Work", 120, kind=SpotKind.WORK, sort_index=0),
            make_spot("Meeting", 90, kind=SpotKind.MEETING, sort_index=1),
            make_spot("Gym", 60, zone=DayZone.MORNING, kind=SpotKind.SPORT),
            make_spot("Lunch", 60, kind=SpotKind.REST, sort_index=2),
            make_spot("Errand", 60, zone=DayZone.EVENING, kind=SpotKind.ERRAND),
            make_spot("Cooking", 60, zone=DayZone.EVENING, sort_index=1),
        )
        insight = analyze(variant, config)

        assert variant.total_planned_min == 450
        assert insight.overload_delta_min == 30
        assert insight.tight_delta_min == 25
        assert insight.status is OverloadStatus.OVERLOADED
        assert insight.zone_delta(DayZone.MORNING) == 60 - 126
        assert insight.zone_delta(DayZone.DAYTIME) == 270 - 189
        assert insight.zone_delta(DayZone.EVENING) == 120 - 105
        assert insight.primary_over_zone is DayZone.DAYTIME

        kinds = [s.kind for s in insight.suggestions]
        assert kinds == [
            FixKind.COMPRESS,
            FixKind.COMPRESS,
            FixKind.MOVE_ZONE,
            FixKind.INSERT_BREAK,
            FixKind.CREATE_VARIANT,
        ]

        compress_a, compress_b, move, brk, create = insight.suggestions
        assert compress_a.title == 'Compress "Deep Work" by 15 min'
        assert compress_b.title == 'Compress "Meeting" by 15 min'
        assert compress_a.delta_min == 15

        # Lightest non-rest spot in daytime goes to the least-loaded zone
        assert move.title == 'Move "Meeting" to Morning'
        assert move.target_zone is DayZone.MORNING
        assert move.delta_min == 90

        # Daytime already has a rest spot, evening does not
        assert brk.target_zone is DayZone.EVENING
        assert brk.title == "Add 15 min break in Evening"
        assert brk.delta_min == 0

        assert create.title == "Create a lighter variant"

    def test_rest_spots_are_never_compressed(self, make_spot, make_variant, config) -> None:
        variant = make_variant(
            make_spot("Nap", 300, kind=SpotKind.REST),
            make_spot("Short", 20),
            make_spot("Work", 130),
        )
        insight = analyze(variant, config)
        compress = [s for s in insight.suggestions if s.kind is FixKind.COMPRESS]
        assert [s.title for s in compress] == ['Compress "Work" by 15 min']

    def test_compress_reduction_capped_by_floor(self, make_spot, make_variant, config) -> None:
        variant = make_variant(make_spot("Big", 400), make_spot("Small", 22, buffer=10))
        insight = analyze(variant, config)
        compress = {s.title for s in insight.suggestions if s.kind is FixKind.COMPRESS}
        # min(15, 22 - 10) == 12
        assert 'Compress "Small" by 12 min' in compress

    def test_all_five_heuristics_in_priority_order(self, make_spot, make_variant, config) -> None:
        spots = [make_spot(f"S{i}", 50, sort_index=i) for i in range(9)]
        insight = analyze(make_variant(*spots), config)

        assert [s.priority for s in insight.suggestions] == [80, 80, 70, 50, 40, 30]
        assert [s.kind for s in insight.suggestions] == [
            FixKind.COMPRESS,
            FixKind.COMPRESS,
            FixKind.MOVE_ZONE,
            FixKind.INSERT_BREAK,
            FixKind.REMOVE_SPOT,
            FixKind.CREATE_VARIANT,
        ]
        # Equal loads keep list order
        assert insight.suggestions[0].target_spot_id == spots[0].id
        assert insight.suggestions[1].target_spot_id == spots[1].id
        assert insight.suggestions[2].target_spot_id == spots[0].id
        assert insight.suggestions[4].title == 'Remove "S8" (50 min)'
        assert insight.suggestions[4].target_spot_id == spots[8].id

    def test_priorities_are_sorted_descending(self, make_spot, make_variant, config) -> None:
        spots = [make_spot(f"S{i}", 45 + i, sort_index=i) for i in range(10)]
        priorities = [s.priority for s in analyze(make_variant(*spots), config).suggestions]
        assert priorities == sorted(priorities, reverse=True)

    def test_worst_zone_tie_goes_to_declaration_order(self, make_spot, make_variant, config) -> None:
        # Morning +20, daytime +20, evening -10: total 450, overloaded
        variant = make_variant(
            make_spot("M", 146, zone=DayZone.MORNING),
            make_spot("D", 209, zone=DayZone.DAYTIME),
            make_spot("E", 95, zone=DayZone.EVENING),
        )
        move = next(s for s in analyze(variant, config).suggestions if s.kind is FixKind.MOVE_ZONE)
        assert move.title == 'Move "M" to Evening'
        assert move.target_zone is DayZone.EVENING

    def test_only_one_break_suggested(self, make_spot, make_variant, config) -> None:
        variant = make_variant(
            make_spot("M", 200, zone=DayZone.MORNING),
            make_spot("D", 250, zone=DayZone.DAYTIME),
            make_spot("E", 200, zone=DayZone.EVENING),
        )
        breaks = [s for s in analyze(variant, config).suggestions if s.kind is FixKind.INSERT_BREAK]
        assert len(breaks) == 1
        assert breaks[0].target_zone is DayZone.MORNING

    def test_tight_day_without_create_variant(self, make_spot, make_variant, config) -> None:
        """Create-variant needs delta above the overload threshold."""
        insight = analyze(make_variant(make_spot("A", 430)), config)
        assert insight.status is OverloadStatus.TIGHT
        assert FixKind.CREATE_VARIANT not in {s.kind for s in insight.suggestions}

    def test_to_dict_is_json_serializable(self, make_spot, make_variant, config) -> None:
        variant = make_variant(make_spot("A", 300), make_spot("B", 150))
        data = analyze(variant, config).to_dict()
        assert data["status"] == "overloaded"
        assert set(data["zone_deltas"]) == {"morning", "daytime", "evening"}
        assert data["suggestions"][0]["kind"] == "compress"
        json.dumps(data)


class TestLeastLoadedZone:
    def test_excludes_source_zone(self) -> None:
        deltas = {DayZone.MORNING: 50, DayZone.DAYTIME: -100, DayZone.EVENING: 0}
        assert least_loaded_zone(DayZone.DAYTIME, deltas) is DayZone.EVENING

    def test_tie_goes_to_declaration_order(self) -> None:
        deltas = {DayZone.MORNING: -10, DayZone.DAYTIME: 50, DayZone.EVENING: -10}
        assert least_loaded_zone(DayZone.DAYTIME, deltas) is DayZone.MORNING


# =============================================================================
# Apply Suggestion
# =============================================================================


class TestApplySuggestion:
    def test_compress_reduces_duration(self, make_spot, make_variant, config) -> None:
        spot = make_spot("Work", 60)
        variant = make_variant(spot)
        suggestion = FixSuggestion(kind=FixKind.COMPRESS, title="c", delta_min=15, target_spot_id=spot.id)

        result = apply_suggestion(suggestion, variant, config)

        assert result.spot(spot.id).duration_min == 45
        # Input untouched
        assert variant.spot(spot.id).duration_min == 60

    def test_compress_keeps_five_minutes(self, make_spot, make_variant, config) -> None:
        spot = make_spot("Short", 12)
        suggestion = FixSuggestion(kind=FixKind.COMPRESS, title="c", delta_min=15, target_spot_id=spot.id)
        result = apply_suggestion(suggestion, make_variant(spot), config)
        assert result.spot(spot.id).duration_min == 5

    def test_compress_never_lengthens(self, make_spot, make_variant, config) -> None:
        spot = make_spot("Tiny", 3)
        suggestion = FixSuggestion(kind=FixKind.COMPRESS, title="c", delta_min=15, target_spot_id=spot.id)
        result = apply_suggestion(suggestion, make_variant(spot), config)
        assert result.spot(spot.id).duration_min == 3

    def test_move_zone_appends_to_target(self, make_spot, make_variant, config) -> None:
        mover = make_spot("Mover", 30, zone=DayZone.DAYTIME)
        variant = make_variant(
            mover,
            make_spot("E0", 30, zone=DayZone.EVENING, sort_index=0),
            make_spot("E3", 30, zone=DayZone.EVENING, sort_index=3),
        )
        suggestion = FixSuggestion(
            kind=FixKind.MOVE_ZONE,
            title="m",
            delta_min=30,
            target_spot_id=mover.id,
            target_zone=DayZone.EVENING,
        )
        moved = apply_suggestion(suggestion, variant, config).spot(mover.id)
        assert moved.zone is DayZone.EVENING
        assert moved.sort_index == 4

    def test_insert_break_defaults_to_daytime(self, make_spot, make_variant, config) -> None:
        variant = make_variant(make_spot("A", 30, sort_index=2))
        suggestion = FixSuggestion(kind=FixKind.INSERT_BREAK, title="b", delta_min=0)

        result = apply_suggestion(suggestion, variant, config)

        assert result.spot_count == 2
        brk = result.spots[-1]
        assert brk.title == "Rest & Recharge"
        assert brk.kind is SpotKind.REST
        assert brk.zone is DayZone.DAYTIME
        assert brk.duration_min == 15
        assert brk.effort is SpotEffort.LIGHT
        assert brk.icon_name == "bed.double.fill"
        assert brk.sort_index == 3
        assert brk.computed_load_min == 15

    def test_remove_spot(self, make_spot, make_variant, config) -> None:
        keep, drop = make_spot("Keep"), make_spot("Drop")
        suggestion = FixSuggestion(kind=FixKind.REMOVE_SPOT, title="r", delta_min=30, target_spot_id=drop.id)
        result = apply_suggestion(suggestion, make_variant(keep, drop), config)
        assert [s.id for s in result.spots] == [keep.id]

    def test_create_variant_is_a_noop(self, make_spot, make_variant, config) -> None:
        variant = make_variant(make_spot("A"), make_spot("B"))
        suggestion = FixSuggestion(kind=FixKind.CREATE_VARIANT, title="v", delta_min=0)
        result = apply_suggestion(suggestion, variant, config)
        assert result.id == variant.id
        assert result.spots == variant.spots
        assert result is not variant

    def test_bumps_updated_at(self, make_spot, make_variant, config) -> None:
        variant = make_variant(make_spot("A"))
        suggestion = FixSuggestion(kind=FixKind.INSERT_BREAK, title="b", delta_min=0)
        assert apply_suggestion(suggestion, variant, config).updated_at >= variant.updated_at

    def test_missing_target_changes_nothing(self, make_spot, make_variant, config) -> None:
        from uuid import uuid4

        variant = make_variant(make_spot("A", 60))
        suggestion = FixSuggestion(kind=FixKind.COMPRESS, title="c", delta_min=15, target_spot_id=uuid4())
        assert apply_suggestion(suggestion, variant, config).spots == variant.spots


# =============================================================================
# Density, Overhead, Top Spots
# =============================================================================


class TestDensityAndOverhead:
    def test_density_exceeded(self, make_spot, make_variant, config) -> None:
        variant = make_variant(*[make_spot(f"S{i}") for i in range(7)])
        warning = density_check(variant, config)
        assert warning.is_exceeded is True
        assert warning.recommended == 6
        assert warning.display_text == "7 spots, 6 recommended for this mode"

    def test_density_at_recommendation(self, make_spot, make_variant, config) -> None:
        variant = make_variant(*[make_spot(f"S{i}") for i in range(4)], rhythm=EnergyRhythm.LIGHT)
        warning = density_check(variant, config)
        assert warning.is_exceeded is False
        assert warning.display_text is None

    def test_overhead_breakdown(self, make_spot, make_variant) -> None:
        variant = make_variant(make_spot("A", 60, travel=20, buffer=20))
        breakdown = overhead_breakdown(variant)
        assert breakdown.total_min == 100
        assert breakdown.duration_percent == pytest.approx(0.6)
        assert breakdown.travel_percent == pytest.approx(0.2)
        assert breakdown.buffer_percent == pytest.approx(0.2)

    def test_overhead_of_empty_variant(self, make_variant) -> None:
        breakdown = overhead_breakdown(make_variant())
        assert breakdown.total_min == 0
        assert breakdown.duration_percent == 0.0

    def test_top_spots_by_load(self, make_spot, make_variant) -> None:
        variant = make_variant(*[make_spot(f"S{i}", 10 * (i + 1)) for i in range(8)])
        top = top_spots_by_load(variant)
        assert len(top) == 6
        assert [e.title for e in top[:2]] == ["S7", "S6"]
        assert top[0].load_min == 80
        assert len(top_spots_by_load(variant, limit=2)) == 2


# =============================================================================
# Variant Comparison
# =============================================================================


class TestCompareVariants:
    def test_added_removed_moved_compressed(self, make_spot, make_variant, config) -> None:
        a = make_variant(
            make_spot("Gym", 60, zone=DayZone.MORNING),
            make_spot("Work", 120),
            make_spot("Shop", 30, zone=DayZone.EVENING),
        )
        b = make_variant(
            make_spot("Gym", 60, zone=DayZone.EVENING),
            make_spot("Work", 90),
            make_spot("Read", 30, zone=DayZone.EVENING),
            title="Light",
        )
        result = compare_variants(a, b, config)

        assert result.added_spots == ["Read"]
        assert result.removed_spots == ["Shop"]
        assert result.moved_spots == ["Gym"]
        assert result.compressed_spots == ["Work"]
        assert result.variant_a.total_min == 210
        assert result.variant_b.title == "Light"
        assert result.variant_b.evening_min == 90

    def test_matching_is_by_title(self, make_spot, make_variant, config) -> None:
        """Duplicate titles collapse: the first spot with a title stands for all."""
        a = make_variant(
            make_spot("Walk", 30, zone=DayZone.MORNING),
            make_spot("Walk", 30, zone=DayZone.EVENING),
        )
        b = make_variant(make_spot("Walk", 30, zone=DayZone.EVENING))
        result = compare_variants(a, b, config)

        assert result.removed_spots == []
        assert result.moved_spots == ["Walk"]

    def test_ids_are_ignored(self, make_spot, make_variant, config) -> None:
        a = make_variant(make_spot("Same", 30))
        b = make_variant(make_spot("Same", 30))
        result = compare_variants(a, b, config)
        assert (result.added_spots, result.removed_spots, result.moved_spots) == ([], [], [])
