"""Session manager: setup prompts, the play-again loop and in-memory history.

Everything here is plain sequential I/O around the round orchestrator. All
prompts go through the same :class:`LineReader` as the game turns, so a
read abandoned by a timed-out turn can never swallow a setup answer.

History lives only for the life of the process.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable, Sequence

from .config import Settings
from .game_constants import (
    FEEDBACK_ERROR,
    FEEDBACK_HEADER,
    FEEDBACK_HELP,
    FEEDBACK_INFO,
    FEEDBACK_PROMPT,
    FEEDBACK_SUCCESS,
    HELP_TOKEN,
    MAX_INVALID_DIFFICULTY_CHOICES,
    MAX_PLAYERS,
)
from .display import (
    render_difficulty_help,
    render_difficulty_menu,
    render_final_statistics,
    render_range_help,
    render_restart_help,
    render_session_intro,
    render_session_results,
)
from .line_reader import InputUnavailableError, LineReader
from .models import Difficulty, GameRecord, SessionConfig, SessionResult, max_range_for
from .orchestrator import FeedbackSink, run_session
from .turn_resolver import parse_integer

logger = logging.getLogger(__name__)

_DIFFICULTY_ALIASES = {
    "easy": Difficulty.EASY, "1": Difficulty.EASY, "e": Difficulty.EASY,
    "medium": Difficulty.MEDIUM, "2": Difficulty.MEDIUM, "m": Difficulty.MEDIUM,
    "hard": Difficulty.HARD, "3": Difficulty.HARD, "h": Difficulty.HARD,
}

_YES = {"yes", "y", "yeah", "yep", "1"}
_NO = {"no", "n", "nope", "0"}

RECENT_GAMES_SHOWN = 5
RECENT_GAMES_MIN_HISTORY = 3


def new_session_config(
    difficulty: Difficulty,
    players: Sequence[str],
    time_limit: float,
    rng: random.Random | None = None,
) -> SessionConfig:
    """Build the configuration for a fresh session with a random target."""
    rng = rng or random.Random()
    max_range = max_range_for(difficulty)
    return SessionConfig(
        difficulty=difficulty,
        target=rng.randint(1, max_range),
        max_range=max_range,
        time_limit=time_limit,
        players=tuple(players),
    )


class SessionHistory:
    """All-time leaderboard and completed-game log."""

    def __init__(self) -> None:
        self.leaderboard: dict[str, int] = {}
        self.games: list[GameRecord] = []

    def record(self, result: SessionResult) -> GameRecord | None:
        """Fold *result* into the leaderboard and history.

        Returns the new history entry, or ``None`` if nobody scored.
        """
        for player, score in result.scores.items():
            self.leaderboard[player] = self.leaderboard.get(player, 0) + score
        if not result.scores:
            return None

        winner, final_score = max(result.scores.items(), key=lambda item: item[1])
        record = GameRecord(
            difficulty=result.difficulty,
            winner=winner,
            attempts=result.attempts,
            duration_seconds=result.elapsed_seconds,
            player_count=len(result.players),
            final_score=final_score,
        )
        self.games.append(record)
        return record

    def ranked_leaderboard(self) -> list[tuple[str, int]]:
        """Leaderboard entries, highest score first (ties by name)."""
        return sorted(self.leaderboard.items(), key=lambda item: (-item[1], item[0]))

    def statistics(self) -> dict:
        n = len(self.games)
        if n == 0:
            return {
                "total_games": 0,
                "average_attempts": 0.0,
                "average_duration_seconds": 0.0,
                "difficulty_distribution": {},
                "recent_games": [],
            }

        counts: dict[str, int] = {}
        for game in self.games:
            counts[game.difficulty.value] = counts.get(game.difficulty.value, 0) + 1

        recent: list[dict] = []
        if n >= RECENT_GAMES_MIN_HISTORY:
            start = max(0, n - RECENT_GAMES_SHOWN)
            for number, game in enumerate(self.games[start:], start=start + 1):
                recent.append({
                    "number": number,
                    "winner": game.winner,
                    "attempts": game.attempts,
                    "difficulty": game.difficulty.value,
                })

        return {
            "total_games": n,
            "average_attempts": sum(g.attempts for g in self.games) / n,
            "average_duration_seconds": sum(g.duration_seconds for g in self.games) / n,
            "difficulty_distribution": {
                difficulty: {"games": count, "percentage": count / n * 100}
                for difficulty, count in counts.items()
            },
            "recent_games": recent,
        }


class SessionManager:
    def __init__(
        self,
        reader: LineReader,
        feedback: FeedbackSink,
        *,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
        difficulty: Difficulty | None = None,
        players: Sequence[str] | None = None,
    ) -> None:
        self.reader = reader
        self.feedback = feedback
        self.settings = settings or Settings()
        self.rng = rng or random.Random(self.settings.seed)
        self.clock = clock
        self.preset_difficulty = difficulty
        self.preset_players = list(players) if players else None
        self.history = SessionHistory()

    # ------------------------------------------------------------------
    # Prompt helpers
    # ------------------------------------------------------------------

    async def ask(self, prompt: str) -> str | None:
        """Prompt and return the stripped answer, or ``None`` if input is gone."""
        if self.reader.exhausted:
            return None
        self.feedback(prompt, FEEDBACK_PROMPT)
        try:
            line = await self.reader.read_line()
        except InputUnavailableError:
            logger.warning("Input unavailable while prompting: %s", prompt.strip())
            return None
        return None if line is None else line.strip()

    async def ask_int(self, prompt: str, low: int, high: int) -> int | None:
        while True:
            answer = await self.ask(prompt)
            if answer is None:
                return None
            if answer.lower() == HELP_TOKEN:
                self.feedback(render_range_help(low, high), FEEDBACK_HELP)
                continue
            value = parse_integer(answer)
            if value is None:
                self.feedback(" X Please enter a valid number (digits only).", FEEDBACK_ERROR)
                continue
            if not low <= value <= high:
                self.feedback(f" X Number must be between {low} and {high}.", FEEDBACK_ERROR)
                continue
            return value

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    async def select_difficulty(self) -> Difficulty:
        self.feedback("🎮 Difficulty Selection", FEEDBACK_HEADER)
        self.feedback(render_difficulty_menu(), FEEDBACK_INFO)

        invalid = 0
        while invalid < MAX_INVALID_DIFFICULTY_CHOICES:
            answer = await self.ask("Enter your choice (easy/medium/hard or 1/2/3): ")
            choice = (answer or "").lower()
            if choice in _DIFFICULTY_ALIASES:
                return _DIFFICULTY_ALIASES[choice]
            if choice == HELP_TOKEN:
                # Help requests don't count as invalid attempts
                self.feedback(render_difficulty_help(), FEEDBACK_HELP)
                continue
            invalid += 1
            remaining = MAX_INVALID_DIFFICULTY_CHOICES - invalid
            if remaining > 0:
                self.feedback(f"Invalid choice. {remaining} attempts remaining.", FEEDBACK_ERROR)

        self.feedback("Too many invalid attempts. Defaulting to Medium difficulty.", FEEDBACK_INFO)
        return Difficulty.MEDIUM

    async def register_players(self) -> list[str]:
        self.feedback("Player Registration", FEEDBACK_HEADER)
        count = await self.ask_int(f"Enter number of players (1-{MAX_PLAYERS}): ", 1, MAX_PLAYERS)
        if count is None:
            count = 1
        self.feedback(f"Registering {count} player(s)...", FEEDBACK_INFO)

        players: list[str] = []
        for i in range(1, count + 1):
            while True:
                answer = await self.ask(f"Enter name for Player {i} (or press Enter for default): ")
                if answer is None:
                    name = _unused_default_name(i, players)
                else:
                    name = answer or f"Player{i}"
                if name not in players:
                    players.append(name)
                    self.feedback(f"{name} registered successfully!", FEEDBACK_SUCCESS)
                    break
                self.feedback("Name already taken. Please choose another name.", FEEDBACK_ERROR)
        return players

    async def prompt_restart(self) -> bool:
        self.feedback("Session Complete", FEEDBACK_HEADER)
        while True:
            answer = await self.ask("Would you like to play another round? (yes/no): ")
            if answer is None:
                return False
            response = answer.lower()
            if response in _YES:
                return True
            if response in _NO:
                return False
            if response == HELP_TOKEN:
                self.feedback(render_restart_help(), FEEDBACK_HELP)
            else:
                self.feedback("Please answer 'yes' or 'no' (or 'help' for options).", FEEDBACK_INFO)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def play_session(self) -> SessionResult:
        difficulty = self.preset_difficulty or await self.select_difficulty()
        players = self.preset_players or await self.register_players()
        config = new_session_config(difficulty, players, self.settings.time_limit, self.rng)

        self.feedback("🚀 Game Session Initialized", FEEDBACK_HEADER)
        self.feedback(render_session_intro(config), FEEDBACK_INFO)

        result = await run_session(config, self.reader, self.feedback, clock=self.clock)

        self.feedback("Game Session Results", FEEDBACK_HEADER)
        self.feedback(render_session_results(result), FEEDBACK_INFO)
        self.history.record(result)
        return result

    async def run(self) -> SessionHistory:
        """Play sessions until the players decline a restart."""
        while True:
            await self.play_session()
            if not await self.prompt_restart():
                break
            self.feedback("=" * 80, FEEDBACK_INFO)

        summary = render_final_statistics(self.history)
        if summary:
            self.feedback("Final Statistics Dashboard", FEEDBACK_HEADER)
            self.feedback(summary, FEEDBACK_INFO)
        self.feedback(
            "Thank you for playing! May your future guesses be ever accurate!",
            FEEDBACK_SUCCESS,
        )
        return self.history


def _unused_default_name(index: int, taken: list[str]) -> str:
    name = f"Player{index}"
    suffix = 2
    while name in taken:
        name = f"Player{index}-{suffix}"
        suffix += 1
    return name
