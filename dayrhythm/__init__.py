"""
DayRhythm: single-user day planning with energy budgets.

Packages:
    - models: Persisted domain records (pydantic)
    - services: Overload engine, state store, persistence, undo, statistics
    - api: Thin REST surface for a presentation client
    - lib: Exceptions and logging
    - config: Runtime settings
"""

__version__ = "0.1.0"
