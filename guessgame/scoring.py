"""Winner scoring.

The raw score starts at ``BASE_SCORE`` and loses 10 points per attempt and
1 point per full 5 seconds of play, floored at zero. The difficulty
multiplier is then applied (medium is truncated toward zero).
"""

from __future__ import annotations

import math

from .game_constants import BASE_SCORE, DIFFICULTY_EASY, DIFFICULTY_HARD, DIFFICULTY_MEDIUM

ATTEMPT_PENALTY = 10
TIME_PENALTY_INTERVAL = 5  # seconds per penalty point

DIFFICULTY_MULTIPLIERS: dict[str, float] = {
    DIFFICULTY_EASY: 1.0,
    DIFFICULTY_MEDIUM: 1.5,
    DIFFICULTY_HARD: 2.0,
}


def raw_score(attempts: int, elapsed_seconds: float) -> int:
    if attempts < 0:
        raise ValueError(f"attempts must be non-negative, got {attempts}")
    if elapsed_seconds < 0:
        raise ValueError(f"elapsed_seconds must be non-negative, got {elapsed_seconds}")
    time_penalty = math.floor(elapsed_seconds / TIME_PENALTY_INTERVAL)
    attempt_penalty = attempts * ATTEMPT_PENALTY
    return max(0, BASE_SCORE - attempt_penalty - time_penalty)


def calculate_score(attempts: int, difficulty: str, elapsed_seconds: float) -> int:
    """Score for a win after *attempts* total attempts and *elapsed_seconds* of play.

    Unknown difficulties score like easy (no multiplier).
    """
    raw = raw_score(attempts, elapsed_seconds)
    multiplier = DIFFICULTY_MULTIPLIERS.get(difficulty, 1.0)
    return int(raw * multiplier)
