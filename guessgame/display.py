"""Terminal presentation: the ANSI feedback sink and text renderers.

Nothing outside this module emits color codes. The game core only hands
``(message, category)`` pairs to a feedback sink; :class:`ConsoleFeedback`
is the sink used by the CLI.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from .game_constants import (
    EASY_MAX_RANGE,
    FEEDBACK_ERROR,
    FEEDBACK_HEADER,
    FEEDBACK_HELP,
    FEEDBACK_INFO,
    FEEDBACK_PROMPT,
    FEEDBACK_SUCCESS,
    HARD_MAX_RANGE,
    MEDIUM_MAX_RANGE,
)

if TYPE_CHECKING:
    from .models import SessionConfig, SessionResult
    from .session_manager import SessionHistory

COLOR_RESET = "\033[0m"
COLOR_RED = "\033[31m"
COLOR_GREEN = "\033[32m"
COLOR_YELLOW = "\033[33m"
COLOR_BLUE = "\033[34m"
COLOR_PURPLE = "\033[35m"
COLOR_CYAN = "\033[36m"

SEPARATOR_LINE = "━" * 69
HEADER_PREFIX = "┌─"
HEADER_WIDTH = 50

_CATEGORY_COLORS = {
    FEEDBACK_ERROR: COLOR_RED,
    FEEDBACK_INFO: COLOR_YELLOW,
    FEEDBACK_SUCCESS: COLOR_GREEN,
    FEEDBACK_PROMPT: COLOR_BLUE,
    FEEDBACK_HELP: COLOR_CYAN,
    FEEDBACK_HEADER: COLOR_PURPLE,
}

_MEDALS = ["🥇", "🥈", "🥉"]


class ConsoleFeedback:
    """Feedback sink writing colored lines to a text stream.

    Prompts are written without a trailing newline and flushed so the
    player types on the same line.
    """

    def __init__(self, stream: TextIO | None = None, *, color: bool = True) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.color = color

    def _paint(self, text: str, category: str) -> str:
        code = _CATEGORY_COLORS.get(category)
        if not self.color or code is None:
            return text
        return f"{code}{text}{COLOR_RESET}"

    def __call__(self, message: str, category: str) -> None:
        if category == FEEDBACK_PROMPT:
            self.stream.write(self._paint(message, category))
            self.stream.flush()
            return
        if category == FEEDBACK_HEADER:
            message = render_header(message)
        self.stream.write(self._paint(message, category) + "\n")
        self.stream.flush()


def render_header(text: str) -> str:
    return f"\n{HEADER_PREFIX} {text} {'─' * max(0, HEADER_WIDTH - len(text))}"


WELCOME_BANNER = "\n".join([
    "Features: Multiplayer • Difficulty Levels • Smart Scoring • Statistics • Help System",
    "💡 Type 'help' during any input prompt for assistance",
    SEPARATOR_LINE,
])


def render_difficulty_menu() -> str:
    return "\n".join([
        "Available Difficulties:",
        f"  1. Easy   - Range: 1-{EASY_MAX_RANGE} (Beginner friendly)",
        f"  2. Medium - Range: 1-{MEDIUM_MAX_RANGE} (Balanced challenge)",
        f"  3. Hard   - Range: 1-{HARD_MAX_RANGE} (Expert level)",
    ])


def render_difficulty_help() -> str:
    return "\n".join([
        "Difficulty Guide",
        f"Easy (1-{EASY_MAX_RANGE}): Ideal for beginners, quick games",
        "  • Scoring: No multiplier",
        "  • Strategy: Random guessing often works",
        f"Medium (1-{MEDIUM_MAX_RANGE}): Balanced challenge for most players",
        "  • Scoring: 1.5x multiplier",
        "  • Strategy: Binary search recommended",
        f"Hard (1-{HARD_MAX_RANGE}): Expert level, requires strategy",
        "  • Scoring: 2x multiplier",
        "  • Strategy: Systematic approach essential",
    ])


def render_range_help(low: int, high: int) -> str:
    return "\n".join([
        "Input Help",
        f"Valid range: {low} to {high}",
        "Enter only numbers (no letters or symbols)",
        f"Examples: {low}, {(low + high) // 2}, {high}",
    ])


def render_restart_help() -> str:
    return "\n".join([
        "Options:",
        "  yes, y, 1 - Start another game",
        "  no, n, 0 - Exit and view final statistics",
    ])


def render_session_intro(config: SessionConfig) -> str:
    return "\n".join([
        f"Difficulty: {config.difficulty.value.title()} (Range: 1-{config.max_range})",
        f"Players: {', '.join(config.players)}",
        f"Time Limit: {config.time_limit:g}s per guess",
        SEPARATOR_LINE,
    ])


def render_session_results(result: SessionResult) -> str:
    attempts = max(result.attempts, 1)
    lines = [
        "Game Configuration:",
        f"  Difficulty: {result.difficulty.value.title()}",
        f"  Target Number: {result.target}",
        f"  Number Range: 1-{result.max_range}",
        "",
        "Performance Metrics:",
        f"  Total Attempts: {result.attempts}",
        f"  Game Duration: {round(result.elapsed_seconds)}s",
        f"  Average Time per Attempt: {result.elapsed_seconds / attempts:.1f}s",
        "",
        "Player Scores:",
    ]
    for player in result.players:
        if player in result.scores:
            lines.append(f"  {player}: {result.scores[player]} points (WINNER!)")
        else:
            lines.append(f"  {player}: No score")
    lines.append(SEPARATOR_LINE)
    return "\n".join(lines)


def render_final_statistics(history: SessionHistory) -> str:
    """Render the all-time leaderboard and session analytics.

    Returns an empty string when nothing has been played yet.
    """
    ranked = history.ranked_leaderboard()
    stats = history.statistics()
    if not ranked and not stats["total_games"]:
        return ""

    lines: list[str] = []
    if ranked:
        lines.append("All-Time Leaderboard:")
        for i, (name, score) in enumerate(ranked):
            medal = _MEDALS[i] if i < len(_MEDALS) else f"{i + 1}."
            lines.append(f"  {medal} {name}: {score} points")

    if stats["total_games"]:
        lines += [
            "",
            "Game Session Analytics:",
            f"  Total Games Played: {stats['total_games']}",
            f"  Average Attempts per Game: {stats['average_attempts']:.1f}",
            f"  Average Game Duration: {round(stats['average_duration_seconds'])}s",
            "",
            "Difficulty Distribution:",
        ]
        for difficulty, entry in stats["difficulty_distribution"].items():
            lines.append(
                f"  {difficulty.title()}: {entry['games']} games ({entry['percentage']:.1f}%)"
            )
        recent = stats["recent_games"]
        if recent:
            lines += ["", f"Recent Performance (Last {len(recent)} Games):"]
            for game in recent:
                lines.append(
                    f"  Game {game['number']}: {game['winner']} won in "
                    f"{game['attempts']} attempts ({game['difficulty'].title()})"
                )
    lines.append(SEPARATOR_LINE)
    return "\n".join(lines)
