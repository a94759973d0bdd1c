"""
Streakbook — Centralized configuration.

Loads all settings from .env and validates them.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

# Load .env from project root (one level up from streakbook/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # SQLite
    DATABASE_PATH: str = "data/streakbook.db"

    # HTTP server
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Logging
    LOG_LEVEL: str = "INFO"

    # History
    HISTORY_PATCH_WINDOW_DAYS: int = 7
    MIN_HISTORY_YEAR: int = 2024

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def parse_log_level(cls, v: str) -> str:
        level = str(v).strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {v!r}")
        return level

    @field_validator("PORT", "HISTORY_PATCH_WINDOW_DAYS", mode="before")
    @classmethod
    def parse_non_negative(cls, v: str | int) -> int:
        value = int(v)
        if value < 0:
            raise ValueError("must not be negative")
        return value


def _load_settings() -> Settings:
    """Load settings from environment, exiting on invalid values."""
    try:
        return Settings(
            DATABASE_PATH=os.getenv("DATABASE_PATH", "data/streakbook.db"),
            HOST=os.getenv("HOST", "127.0.0.1"),
            PORT=os.getenv("PORT", "8000"),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
            HISTORY_PATCH_WINDOW_DAYS=os.getenv("HISTORY_PATCH_WINDOW_DAYS", "7"),
            MIN_HISTORY_YEAR=os.getenv("MIN_HISTORY_YEAR", "2024"),
        )
    except ValidationError as exc:
        print(f"ERROR: invalid configuration in .env:\n{exc}", file=sys.stderr)
        sys.exit(1)


# Singleton — imported by all other modules as:
#   from streakbook.config import settings
settings = _load_settings()
