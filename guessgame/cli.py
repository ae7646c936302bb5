"""Command-line entry point.

Usage:
    python run.py                               # interactive setup
    python run.py --difficulty hard --players Ana Bo --time-limit 15
    GUESSGAME_LOG_LEVEL=DEBUG python run.py     # game logs go to stderr
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import threading

from .config import Settings, parse_log_level, parse_time_limit
from .display import WELCOME_BANNER, ConsoleFeedback
from .game_constants import FEEDBACK_HEADER, FEEDBACK_INFO, MAX_PLAYERS
from .line_reader import LineReader
from .models import Difficulty
from .session_manager import SessionManager

logger = logging.getLogger(__name__)


class StdinLineSource:
    """Blocking line source over a text stream.

    The first end-of-stream is reported as ``None``. Later reads block until
    :meth:`close`, so a game whose input has gone away keeps timing out turn
    by turn instead of spinning. With piped input that ends before anyone
    guesses the number, the game therefore runs until interrupted (Ctrl-C).
    """

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdin
        self._eof_reported = False
        self._closed = threading.Event()

    def __call__(self) -> str | None:
        if self._eof_reported:
            self._closed.wait()
            return None
        line = self.stream.readline()
        if line == "":
            self._eof_reported = True
            return None
        return line

    def close(self) -> None:
        self._closed.set()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="guessgame",
        description="Turn-based multiplayer number guessing game",
    )
    parser.add_argument("--time-limit", type=float, default=None,
                        help="Seconds allowed per guess (env: GUESSGAME_TIME_LIMIT)")
    parser.add_argument("--difficulty", choices=[d.value for d in Difficulty], default=None,
                        help="Skip the difficulty menu")
    parser.add_argument("--players", nargs="+", metavar="NAME", default=None,
                        help=f"Skip player registration (1-{MAX_PLAYERS} unique names)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the secret number (env: GUESSGAME_SEED)")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    parser.add_argument("--log-level", default=None,
                        help="Logging level for stderr (env: GUESSGAME_LOG_LEVEL)")
    return parser


def resolve_settings(args: argparse.Namespace, env_settings: Settings) -> Settings:
    """Overlay command-line flags on the environment settings."""
    return Settings(
        time_limit=(parse_time_limit(str(args.time_limit))
                    if args.time_limit is not None else env_settings.time_limit),
        log_level=(parse_log_level(args.log_level)
                   if args.log_level is not None else env_settings.log_level),
        seed=args.seed if args.seed is not None else env_settings.seed,
        color=env_settings.color and not args.no_color,
    )


def _validate_players(parser: argparse.ArgumentParser, players: list[str] | None) -> None:
    if players is None:
        return
    if len(players) > MAX_PLAYERS:
        parser.error(f"at most {MAX_PLAYERS} players are allowed")
    if len(set(players)) != len(players):
        parser.error("player names must be unique")
    if any(not name.strip() for name in players):
        parser.error("player names must not be blank")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = resolve_settings(args, Settings.from_env())
    except ValueError as exc:
        parser.error(str(exc))
    _validate_players(parser, args.players)

    logging.basicConfig(
        level=settings.log_level_value,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    feedback = ConsoleFeedback(color=settings.color)
    source = StdinLineSource()
    manager = SessionManager(
        LineReader(source),
        feedback,
        settings=settings,
        difficulty=Difficulty(args.difficulty) if args.difficulty else None,
        players=args.players,
    )

    feedback(" Ultimate Number Guessing Game - Enhanced Edition ", FEEDBACK_HEADER)
    feedback(WELCOME_BANNER, FEEDBACK_INFO)
    try:
        asyncio.run(manager.run())
    except KeyboardInterrupt:
        feedback("\nGame interrupted. Goodbye!", FEEDBACK_INFO)
        return 130
    finally:
        source.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
