"""Session data model.

``SessionConfig`` and ``SessionResult`` are pydantic models so that a bad
roster or an out-of-range target is rejected before a session starts.
``TurnOutcome`` is a plain frozen dataclass: it lives for one turn only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .game_constants import (
    DIFFICULTY_EASY,
    DIFFICULTY_HARD,
    DIFFICULTY_MEDIUM,
    EASY_MAX_RANGE,
    HARD_MAX_RANGE,
    HINT_INPUT_UNAVAILABLE,
    HINT_TIMED_OUT,
    MAX_PLAYERS,
    MEDIUM_MAX_RANGE,
    OUTCOME_CORRECT,
    OUTCOME_HELP,
    OUTCOME_INVALID_FORMAT,
    OUTCOME_OUT_OF_RANGE,
    OUTCOME_TIMED_OUT,
    OUTCOME_VALID_INCORRECT,
)


class Difficulty(str, Enum):
    EASY = DIFFICULTY_EASY
    MEDIUM = DIFFICULTY_MEDIUM
    HARD = DIFFICULTY_HARD

    @property
    def max_range(self) -> int:
        return max_range_for(self)


_MAX_RANGES = {
    DIFFICULTY_EASY: EASY_MAX_RANGE,
    DIFFICULTY_MEDIUM: MEDIUM_MAX_RANGE,
    DIFFICULTY_HARD: HARD_MAX_RANGE,
}


def max_range_for(difficulty: str) -> int:
    """Upper bound of the guess range; unknown difficulties get the medium range."""
    return _MAX_RANGES.get(difficulty, MEDIUM_MAX_RANGE)


class OutcomeKind(str, Enum):
    CORRECT = OUTCOME_CORRECT
    VALID_INCORRECT = OUTCOME_VALID_INCORRECT
    INVALID_FORMAT = OUTCOME_INVALID_FORMAT
    OUT_OF_RANGE = OUTCOME_OUT_OF_RANGE
    TIMED_OUT = OUTCOME_TIMED_OUT
    HELP = OUTCOME_HELP


@dataclass(frozen=True)
class TurnOutcome:
    kind: OutcomeKind
    hint: str = ""
    value: int | None = None
    direction: str | None = None
    proximity: str | None = None
    input_unavailable: bool = False

    @property
    def is_correct(self) -> bool:
        return self.kind is OutcomeKind.CORRECT

    @property
    def is_help(self) -> bool:
        return self.kind is OutcomeKind.HELP

    @classmethod
    def timed_out(cls) -> TurnOutcome:
        return cls(kind=OutcomeKind.TIMED_OUT, hint=HINT_TIMED_OUT)

    @classmethod
    def unavailable(cls, detail: str | None = None) -> TurnOutcome:
        hint = HINT_INPUT_UNAVAILABLE if not detail else f"{HINT_INPUT_UNAVAILABLE} ({detail})"
        return cls(kind=OutcomeKind.INVALID_FORMAT, hint=hint, input_unavailable=True)


class SessionConfig(BaseModel):
    """Everything fixed for the lifetime of one game session."""

    model_config = ConfigDict(frozen=True)

    difficulty: Difficulty
    target: int
    max_range: int = Field(ge=1)
    time_limit: float = Field(gt=0)
    players: tuple[str, ...] = Field(min_length=1, max_length=MAX_PLAYERS)

    @field_validator("players")
    @classmethod
    def _unique_names(cls, players: tuple[str, ...]) -> tuple[str, ...]:
        if any(not name.strip() for name in players):
            raise ValueError("player names must not be blank")
        if len(set(players)) != len(players):
            raise ValueError("player names must be unique")
        return players

    @model_validator(mode="after")
    def _target_in_range(self) -> SessionConfig:
        if not 1 <= self.target <= self.max_range:
            raise ValueError(
                f"target {self.target} outside valid range 1-{self.max_range}"
            )
        return self


class TurnRecord(BaseModel):
    player: str
    kind: OutcomeKind
    value: int | None = None


class SessionResult(BaseModel):
    """Hand-off record from the round orchestrator to the session manager."""

    attempts: int
    winner: str
    elapsed_seconds: float
    scores: dict[str, int]
    difficulty: Difficulty
    target: int
    max_range: int
    players: tuple[str, ...]
    turns: list[TurnRecord] = Field(default_factory=list)


class GameRecord(BaseModel):
    """One completed session, as kept in the in-memory game history."""

    model_config = ConfigDict(frozen=True)

    difficulty: Difficulty
    winner: str
    attempts: int
    duration_seconds: float
    player_count: int
    final_score: int
    timestamp: datetime = Field(default_factory=datetime.now)
