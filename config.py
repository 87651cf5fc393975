"""Service settings.

Values can be overridden via environment variables:
- KEYPAD_HISTORY_LIMIT   completed calculations kept per session
- KEYPAD_PRECISION       decimal places in the trimmed result
- KEYPAD_MAX_SESSIONS    live sessions the store will hold
- KEYPAD_LOG_LEVEL       logging level name for the root logger
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from engine import DEFAULT_HISTORY_LIMIT, CalculatorEngine
from formatting import DEFAULT_PRECISION

ENV_PREFIX = "KEYPAD_"


def _env_int(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{ENV_PREFIX}{name} must be >= {minimum}, got {value}")
    return value


def _env_level(name: str, default: str) -> str:
    level = os.getenv(ENV_PREFIX + name, default).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{ENV_PREFIX}{name} is not a logging level: {level!r}")
    return level


@dataclass(frozen=True)
class Settings:
    history_limit: int = field(
        default_factory=lambda: _env_int("HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT, 1)
    )
    precision: int = field(
        default_factory=lambda: _env_int("PRECISION", DEFAULT_PRECISION, 0)
    )
    max_sessions: int = field(
        default_factory=lambda: _env_int("MAX_SESSIONS", 1000, 1)
    )
    log_level: str = field(default_factory=lambda: _env_level("LOG_LEVEL", "INFO"))

    def engine(self) -> CalculatorEngine:
        return CalculatorEngine(
            history_limit=self.history_limit, precision=self.precision
        )


def load_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings()
