"""
Runtime settings for DayRhythm.

Settings are read from the environment once at process start and passed
to the components that need them. Planner tunables (budgets, thresholds,
zone shares) are NOT here: they live in the persisted PlannerConfig so the
user can change them from the settings screen.

Environment variables:
    DAYRHYTHM_DATA_DIR      Directory holding the state file (default: ~/.dayrhythm)
    DAYRHYTHM_STATE_FILE    State file name (default: day_rhythm.json)
    DAYRHYTHM_ENVIRONMENT   "development" or "production" (default: development)
    DAYRHYTHM_DEV_MODE      "1" enables console logging and reload
    DAYRHYTHM_HOST          API bind host (default: 127.0.0.1)
    DAYRHYTHM_PORT          API bind port (default: 8000)
    LOG_LEVEL               stdlib level name (default: INFO)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dayrhythm.lib.exceptions import ConfigurationError

DEFAULT_STATE_FILE = "day_rhythm.json"
VALID_ENVIRONMENTS = {"development", "production"}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    """Process-wide runtime settings."""

    data_dir: Path
    state_file: str = DEFAULT_STATE_FILE
    environment: str = "development"
    dev_mode: bool = False
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    @property
    def state_path(self) -> Path:
        """Full path of the persisted state document."""
        return self.data_dir / self.state_file

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Validated Settings

        Raises:
            ConfigurationError: If a value is present but invalid
        """
        env = os.environ if environ is None else environ

        data_dir = env.get("DAYRHYTHM_DATA_DIR") or os.path.join(
            os.path.expanduser("~"), ".dayrhythm"
        )

        state_file = env.get("DAYRHYTHM_STATE_FILE", DEFAULT_STATE_FILE).strip()
        if not state_file or "/" in state_file or "\\" in state_file:
            raise ConfigurationError(
                f"DAYRHYTHM_STATE_FILE must be a plain file name, got '{state_file}'"
            )

        environment = env.get("DAYRHYTHM_ENVIRONMENT", "development").lower()
        if environment not in VALID_ENVIRONMENTS:
            raise ConfigurationError(
                f"DAYRHYTHM_ENVIRONMENT must be one of {sorted(VALID_ENVIRONMENTS)}, "
                f"got '{environment}'"
            )

        port_raw = env.get("DAYRHYTHM_PORT", "8000")
        try:
            port = int(port_raw)
        except ValueError as e:
            raise ConfigurationError(f"DAYRHYTHM_PORT must be an integer, got '{port_raw}'") from e
        if not 0 < port < 65536:
            raise ConfigurationError(f"DAYRHYTHM_PORT out of range: {port}")

        log_level = env.get("LOG_LEVEL", "INFO").upper()
        if log_level not in VALID_LOG_LEVELS:
            raise ConfigurationError(f"LOG_LEVEL must be one of {sorted(VALID_LOG_LEVELS)}")

        return cls(
            data_dir=Path(data_dir),
            state_file=state_file,
            environment=environment,
            dev_mode=env.get("DAYRHYTHM_DEV_MODE") == "1",
            host=env.get("DAYRHYTHM_HOST", "127.0.0.1"),
            port=port,
            log_level=log_level,
        )
