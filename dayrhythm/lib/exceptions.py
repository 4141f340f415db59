"""
Custom exception hierarchy for DayRhythm.

Provides structured exception types for the planner subsystems:
- Configuration and startup
- Input validation at the API boundary
- Serialization of the persisted state document
- Disk storage

All exceptions inherit from DayRhythmException, enabling catch-all for
planner-specific errors while keeping the ability to catch specific
error types.

Lookup misses (unknown day key, spot id or variant id) are NOT errors:
store helpers treat them as silent no-ops.
"""

from __future__ import annotations


class DayRhythmException(Exception):
    """Base exception for all DayRhythm errors."""


class ConfigurationError(DayRhythmException):
    """Missing or invalid environment settings, or startup failures."""


class ValidationError(DayRhythmException):
    """Input validation, parsing, or type conversion failures."""


class SerializationError(DayRhythmException):
    """JSON encode/decode, data serialization/deserialization failures."""


class StorageError(DayRhythmException):
    """Reading or writing the state file failed."""
