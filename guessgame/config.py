"""Runtime settings read from ``GUESSGAME_*`` environment variables.

    GUESSGAME_TIME_LIMIT   seconds per turn (default 10)
    GUESSGAME_LOG_LEVEL    logging level name (default WARNING)
    GUESSGAME_SEED         optional integer seed for the secret number
    GUESSGAME_NO_COLOR     any non-empty value disables ANSI colors
    NO_COLOR               honoured as well (https://no-color.org)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .game_constants import DEFAULT_TIME_LIMIT

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    time_limit: float = DEFAULT_TIME_LIMIT
    log_level: str = "WARNING"
    seed: int | None = None
    color: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            time_limit=parse_time_limit(env.get("GUESSGAME_TIME_LIMIT", str(DEFAULT_TIME_LIMIT))),
            log_level=parse_log_level(env.get("GUESSGAME_LOG_LEVEL", "WARNING")),
            seed=_parse_seed(env.get("GUESSGAME_SEED")),
            color=not (env.get("GUESSGAME_NO_COLOR") or env.get("NO_COLOR")),
        )

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


def parse_time_limit(raw: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"time limit must be a number of seconds, got {raw!r}") from None
    if not value > 0 or value == float("inf"):
        raise ValueError(f"time limit must be a positive, finite number of seconds, got {raw!r}")
    return value


def parse_log_level(raw: str) -> str:
    level = raw.strip().upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"unknown log level {raw!r} (expected one of {', '.join(_LOG_LEVELS)})")
    return level


def _parse_seed(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"GUESSGAME_SEED must be an integer, got {raw!r}") from None
