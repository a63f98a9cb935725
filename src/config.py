"""
Mac Calendar Tools — Centralized configuration.

Loads all settings from .env and validates them.
Every other module reads configuration through the `settings` singleton.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (two levels up from src/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Calendar backend: "eventkit" | "applescript"
    CALENDAR_BACKEND: str = "eventkit"

    # Calendar used for new events when the caller names none (empty to skip)
    PREFERRED_CALENDAR: str = ""

    # AppleScript backend
    OSASCRIPT_PATH: str = "osascript"
    OSASCRIPT_TIMEOUT_SECONDS: float = 30.0

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("CALENDAR_BACKEND", mode="before")
    @classmethod
    def normalize_backend(cls, v: str) -> str:
        return str(v).strip().lower()

    @field_validator("OSASCRIPT_TIMEOUT_SECONDS", mode="before")
    @classmethod
    def parse_timeout(cls, v: str | float) -> float:
        timeout = float(v)
        if timeout <= 0:
            raise ValueError("OSASCRIPT_TIMEOUT_SECONDS must be positive")
        return timeout

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return str(v).strip().upper() or "INFO"


def _load_settings() -> Settings:
    """Load settings from environment."""
    return Settings(
        CALENDAR_BACKEND=os.getenv("CALENDAR_BACKEND", "eventkit"),
        PREFERRED_CALENDAR=os.getenv("PREFERRED_CALENDAR", ""),
        OSASCRIPT_PATH=os.getenv("OSASCRIPT_PATH", "osascript"),
        OSASCRIPT_TIMEOUT_SECONDS=os.getenv("OSASCRIPT_TIMEOUT_SECONDS", "30"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
    )


# Singleton — imported by all other modules as:
#   from src.config import settings
settings = _load_settings()
