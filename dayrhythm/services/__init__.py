"""
Services for DayRhythm.

Services:
    - overload_engine: Pure budget math and fix suggestions
    - persistence: JSON document encoding and atomic serial writes
    - undo: Single-slot undo records and reversal
    - stats: Aggregate statistics over all day plans
    - PlannerStore: Single-writer owner of the AppState
"""

from .overload_engine import (
    BudgetSummary,
    DensityWarning,
    FixSuggestion,
    Insight,
    OverheadBreakdown,
    SpotLoadEntry,
    VariantComparison,
    VariantSnapshot,
    analyze,
    apply_suggestion,
    compare_variants,
    compute_status,
    day_summary,
    density_check,
    overhead_breakdown,
    quick_status,
    top_spots_by_load,
    zone_status,
    zone_summary,
)
from .persistence import SerialWriter, atomic_write, decode_state, encode_state
from .stats import PlannerStats, compute_stats
from .state_store import PlannerStore, normalize_zone_order

__all__ = [
    "BudgetSummary",
    "DensityWarning",
    "FixSuggestion",
    "Insight",
    "OverheadBreakdown",
    "PlannerStats",
    "PlannerStore",
    "SerialWriter",
    "SpotLoadEntry",
    "VariantComparison",
    "VariantSnapshot",
    "analyze",
    "apply_suggestion",
    "atomic_write",
    "compare_variants",
    "compute_stats",
    "compute_status",
    "day_summary",
    "decode_state",
    "density_check",
    "encode_state",
    "normalize_zone_order",
    "overhead_breakdown",
    "quick_status",
    "top_spots_by_load",
    "zone_status",
    "zone_summary",
]
