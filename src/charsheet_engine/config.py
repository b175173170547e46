"""
Engine settings, read from the environment (and an optional ``.env`` file).

Variables:
    CHARSHEET_RULES_PATH: JSON/YAML rules overlay merged over the built-in tables.
    CHARSHEET_LOG_LEVEL: level for the ``charsheet-engine`` logger (default WARNING).
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

logger = logging.getLogger("charsheet-engine")

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EngineSettings(BaseModel):
    """Runtime settings for the rules engine."""
    rules_path: Path | None = None
    log_level: LogLevel = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Load settings once per process."""
    if not load_dotenv():
        logger.debug("No .env file found, using process environment only")

    rules_path = os.getenv("CHARSHEET_RULES_PATH", "").strip()
    settings = EngineSettings(
        rules_path=Path(rules_path).expanduser().resolve() if rules_path else None,
        log_level=os.getenv("CHARSHEET_LOG_LEVEL", "WARNING"),
    )
    logger.setLevel(settings.log_level)
    logger.debug(f"📂 Rules overlay: {settings.rules_path or 'none'}")
    return settings


__all__ = ["EngineSettings", "get_settings"]
