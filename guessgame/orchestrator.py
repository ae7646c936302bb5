"""Round orchestrator: drives the round-robin turn loop of one session.

States::

    AwaitingTurn(player) ──help──▶ AwaitingTurn(player)      (no attempt used)
          │
          ▼
    EvaluatingOutcome ──correct──▶ Won (terminal)
          │
          └──otherwise──▶ AwaitingTurn(next player, wrapping)

Every resolved non-help turn consumes one attempt, including timeouts and
invalid input. The orchestrator is the only writer of the running session
state, and it awaits each turn fully before starting the next one.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from .game_constants import (
    FEEDBACK_ERROR,
    FEEDBACK_HELP,
    FEEDBACK_INFO,
    FEEDBACK_PROMPT,
    FEEDBACK_SUCCESS,
    IN_GAME_HELP,
)
from .line_reader import LineReader, LineSource
from .models import OutcomeKind, SessionConfig, SessionResult, TurnOutcome, TurnRecord
from .scoring import calculate_score
from .turn_resolver import TurnResolver

logger = logging.getLogger(__name__)

FeedbackSink = Callable[[str, str], None]


class RoundOrchestrator:
    def __init__(
        self,
        config: SessionConfig,
        resolver: TurnResolver,
        feedback: FeedbackSink,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.resolver = resolver
        self.feedback = feedback
        self._clock = clock
        # Running session state
        self.attempts = 0
        self.scores: dict[str, int] = {}
        self.turns: list[TurnRecord] = []
        self._start: float | None = None

    async def run(self) -> SessionResult:
        config = self.config
        players = config.players
        self._start = self._clock()
        logger.info(
            "Session started: difficulty=%s range=1-%d players=%d time_limit=%.1fs",
            config.difficulty.value, config.max_range, len(players), config.time_limit,
        )
        logger.debug("Target for this session: %d", config.target)

        index = 0
        while True:
            player = players[index]
            outcome = await self._take_turn(player)

            self.attempts += 1
            self.turns.append(TurnRecord(player=player, kind=outcome.kind, value=outcome.value))
            logger.debug("Turn %d: %s -> %s", self.attempts, player, outcome.kind.value)

            if outcome.is_correct:
                return self._finish(player)

            self._report(player, outcome)
            index = (index + 1) % len(players)

    async def _take_turn(self, player: str) -> TurnOutcome:
        """Resolve *player*'s turn, repeating it for as long as they ask for help."""
        while True:
            self.feedback(
                f"[{player}'s Turn] Enter your guess (1-{self.config.max_range}) or 'help': ",
                FEEDBACK_PROMPT,
            )
            outcome = await self.resolver.resolve(
                self.config.target, self.config.max_range, self.config.time_limit,
            )
            if not outcome.is_help:
                return outcome
            self.feedback(IN_GAME_HELP, FEEDBACK_HELP)

    def _report(self, player: str, outcome: TurnOutcome) -> None:
        if outcome.kind is OutcomeKind.TIMED_OUT:
            self.feedback(f"Time's up, {player}! Your turn is skipped.", FEEDBACK_ERROR)
        elif outcome.kind is OutcomeKind.VALID_INCORRECT:
            self.feedback(outcome.hint, FEEDBACK_INFO)
        else:
            self.feedback(outcome.hint, FEEDBACK_ERROR)

    def _finish(self, winner: str) -> SessionResult:
        elapsed = max(0.0, self._clock() - self._start)
        score = calculate_score(self.attempts, self.config.difficulty, elapsed)
        self.scores[winner] = score
        logger.info(
            "Session won by %s after %d attempts in %.1fs (score %d)",
            winner, self.attempts, elapsed, score,
        )
        self.feedback(
            f"{winner} wins with {self.attempts} attempts in {round(elapsed)}s!",
            FEEDBACK_SUCCESS,
        )
        return SessionResult(
            attempts=self.attempts,
            winner=winner,
            elapsed_seconds=elapsed,
            scores=dict(self.scores),
            difficulty=self.config.difficulty,
            target=self.config.target,
            max_range=self.config.max_range,
            players=self.config.players,
            turns=list(self.turns),
        )


async def run_session(
    config: SessionConfig,
    line_source: LineSource | LineReader,
    feedback: FeedbackSink,
    *,
    clock: Callable[[], float] = time.monotonic,
) -> SessionResult:
    """Play one session to completion and return its result record.

    *line_source* is either a blocking line callable or a shared
    :class:`LineReader` (pass the reader when other prompts use the same
    input stream).
    """
    if isinstance(line_source, LineReader):
        reader = line_source
    else:
        reader = LineReader(line_source)
    orchestrator = RoundOrchestrator(config, TurnResolver(reader), feedback, clock=clock)
    return await orchestrator.run()
