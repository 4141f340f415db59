"""Runtime configuration for DayRhythm."""

from dayrhythm.config.settings import Settings

__all__ = ["Settings"]
