"""Test doubles shared across the suite: scripted input, feedback, clock, rng."""

import threading
import time
from dataclasses import dataclass

from guessgame.game_constants import FEEDBACK_PROMPT


# ---------------------------------------------------------------------------
# Scripted line source
# ---------------------------------------------------------------------------

@dataclass
class Delay:
    """Return *line* only after *seconds* have passed."""
    seconds: float
    line: str | None


@dataclass
class Raise:
    """Raise *exc* from the read."""
    exc: Exception


EOF = object()


class ScriptedLineSource:
    """Blocking line source that replays a script.

    Script items are plain strings (returned at once), :class:`Delay`,
    :class:`Raise` or ``EOF`` (returns ``None``). Once the script is used up
    every read blocks until :meth:`close` and then returns ``None``.

    Tracks how many reads were ever in flight at the same time.
    """

    def __init__(self, script):
        self._script = list(script)
        self._lock = threading.Lock()
        self._released = threading.Event()
        self.calls = 0
        self.active = 0
        self.max_active = 0

    def __call__(self):
        with self._lock:
            self.calls += 1
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            item = self._script.pop(0) if self._script else None
        try:
            if item is None:
                self._released.wait()
                return None
            if item is EOF:
                return None
            if isinstance(item, Raise):
                raise item.exc
            if isinstance(item, Delay):
                time.sleep(item.seconds)
                return item.line
            return item + "\n"
        finally:
            with self._lock:
                self.active -= 1

    def close(self):
        self._released.set()


# ---------------------------------------------------------------------------
# Recording feedback sink, fake clock, fixed rng
# ---------------------------------------------------------------------------

class RecordingFeedback:
    def __init__(self):
        self.events: list[tuple[str, str]] = []

    def __call__(self, message, category):
        self.events.append((message, category))

    def messages(self, category=None):
        return [m for m, c in self.events if category is None or c == category]

    def prompts(self):
        return self.messages(FEEDBACK_PROMPT)


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def advance(self, seconds):
        self.now += seconds

    def __call__(self):
        return self.now


class FixedRng:
    """Stands in for random.Random with predetermined targets."""

    def __init__(self, *values):
        self._values = list(values)

    def randint(self, low, high):
        value = self._values.pop(0) if len(self._values) > 1 else self._values[0]
        assert low <= value <= high
        return value
