"""
DayRhythm -- Application Entry Point.

Starts the FastAPI server via uvicorn.

Usage:
    python main.py              # Development (reload with DAYRHYTHM_DEV_MODE=1)
    uvicorn main:app --host 127.0.0.1 --port 8000  # Production
"""

from __future__ import annotations

import uvicorn

from dayrhythm.api import create_app
from dayrhythm.config.settings import Settings
from dayrhythm.lib.logging import setup_logging

settings = Settings.from_env()
setup_logging(settings)

app = create_app(settings=settings)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.dev_mode,
        log_level=settings.log_level.lower(),
    )
