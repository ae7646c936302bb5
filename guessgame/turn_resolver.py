"""Resolve a single player turn: race one line of input against the deadline.

The resolver never prints anything. It returns a :class:`TurnOutcome` and
leaves feedback to the round orchestrator, which keeps it testable without
a terminal.
"""

from __future__ import annotations

import asyncio
import logging
import re

from .game_constants import DIRECTION_TOO_HIGH, DIRECTION_TOO_LOW, HELP_TOKEN, HINT_INVALID_FORMAT
from .hints import hint_label, proximity_hint
from .line_reader import InputUnavailableError, LineReader
from .models import OutcomeKind, TurnOutcome

logger = logging.getLogger(__name__)

# Optional sign followed by ASCII digits; int() alone would also accept
# underscores and non-ASCII digits.
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

# CPython's default int/str conversion limit
_MAX_DIGITS = 4300


def parse_integer(text: str) -> int | None:
    """Parse a plain decimal integer, or return ``None`` if *text* is not one.

    Digit strings longer than the conversion limit are rejected too.
    """
    if not _INTEGER_RE.fullmatch(text) or len(text.lstrip("+-")) > _MAX_DIGITS:
        return None
    try:
        return int(text)
    except ValueError:
        # Interpreter configured with a lower conversion limit
        return None


def classify_guess(text: str, target: int, max_range: int) -> TurnOutcome:
    """Classify one raw input line against *target* in ``[1, max_range]``."""
    text = text.strip().lower()

    if text == HELP_TOKEN:
        return TurnOutcome(kind=OutcomeKind.HELP)

    guess = parse_integer(text)
    if guess is None:
        return TurnOutcome(kind=OutcomeKind.INVALID_FORMAT, hint=HINT_INVALID_FORMAT)

    if guess == target:
        return TurnOutcome(kind=OutcomeKind.CORRECT, value=guess)

    if guess < 1 or guess > max_range:
        return TurnOutcome(
            kind=OutcomeKind.OUT_OF_RANGE,
            hint=f"Number must be between 1 and {max_range}",
            value=guess,
        )

    if guess < target:
        direction, label = DIRECTION_TOO_LOW, "Too low!"
        proximity = proximity_hint(target - guess, max_range)
    else:
        direction, label = DIRECTION_TOO_HIGH, "Too high!"
        proximity = proximity_hint(guess - target, max_range)

    return TurnOutcome(
        kind=OutcomeKind.VALID_INCORRECT,
        hint=f"{label} {hint_label(proximity)}",
        value=guess,
        direction=direction,
        proximity=proximity,
    )


class TurnResolver:
    def __init__(self, reader: LineReader):
        self.reader = reader

    async def resolve(self, target: int, max_range: int, time_limit: float) -> TurnOutcome:
        """Wait at most *time_limit* seconds for one line and classify it.

        Always returns an outcome; a timeout or a failed read is reported as
        an ordinary outcome rather than raised.
        """
        if self.reader.busy:
            logger.debug("Previous read still in flight; waiting it out within this turn")
        try:
            line = await asyncio.wait_for(self.reader.read_line(), timeout=time_limit)
        except asyncio.TimeoutError:
            logger.debug("Turn timed out after %.2fs", time_limit)
            return TurnOutcome.timed_out()
        except InputUnavailableError as exc:
            return TurnOutcome.unavailable(str(exc))

        if line is None:
            logger.debug("Line source reached end of stream")
            return TurnOutcome.unavailable("end of input")

        outcome = classify_guess(line, target, max_range)
        logger.debug("Classified input %r as %s", line.strip(), outcome.kind.value)
        return outcome
