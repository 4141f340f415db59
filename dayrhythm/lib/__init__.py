"""
Lib package for DayRhythm.

Contains shared utilities:
- exceptions.py: Exception hierarchy
- logging.py: structlog + stdlib logging setup (import directly)
"""

from dayrhythm.lib.exceptions import (
    ConfigurationError,
    DayRhythmException,
    SerializationError,
    StorageError,
    ValidationError,
)

__all__ = [
    "ConfigurationError",
    "DayRhythmException",
    "SerializationError",
    "StorageError",
    "ValidationError",
]
