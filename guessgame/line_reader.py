"""Serialized, abandonable reads from a blocking line source.

A line source is any blocking callable returning one line of text, or
``None`` once the stream has ended. Each read runs on its own daemon thread
and reports back through a fresh single-use future, so a caller can stop
waiting (e.g. on a turn deadline) without being able to cancel the read
itself.

Only one read is ever outstanding. Every ``read_line()`` call takes a new
ticket; a read started under an older ticket that is still in flight is
waited out and its value dropped before a new read is issued, so a late line
can never be handed to a later caller.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

LineSource = Callable[[], "str | None"]


class InputUnavailableError(Exception):
    """The line source failed or reached end of stream."""


@dataclass
class PendingRead:
    ticket: int
    future: asyncio.Future


def _deliver(future: asyncio.Future, line: str | None, exc: BaseException | None) -> None:
    # Runs on the event loop thread.
    if future.done():
        return
    if exc is not None:
        future.set_exception(exc)
    else:
        future.set_result(line)


class LineReader:
    def __init__(self, source: LineSource):
        self._source = source
        self._tickets = itertools.count(1)
        self._pending: PendingRead | None = None
        self.exhausted = False

    @property
    def busy(self) -> bool:
        """True while a read (possibly an abandoned one) is still in flight."""
        return self._pending is not None and not self._pending.future.done()

    def _start(self, ticket: int) -> PendingRead:
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def worker():
            line, exc = None, None
            try:
                line = self._source()
            except Exception as e:
                exc = e
            try:
                loop.call_soon_threadsafe(_deliver, future, line, exc)
            except RuntimeError:
                # Event loop already closed; nobody is waiting any more.
                logger.debug("Dropping line read for ticket %d after loop shutdown", ticket)

        thread = threading.Thread(target=worker, name=f"line-reader-{ticket}", daemon=True)
        thread.start()
        return PendingRead(ticket=ticket, future=future)

    async def read_line(self) -> str | None:
        """Return the next line read on behalf of this call.

        Returns ``None`` at end of stream. Raises :class:`InputUnavailableError`
        if the source raised. Cancelling the caller leaves the read in flight;
        its value is discarded by the next call.
        """
        ticket = next(self._tickets)
        while True:
            if self._pending is None:
                self._pending = self._start(ticket)
            pending = self._pending
            try:
                line = await asyncio.shield(pending.future)
            except asyncio.CancelledError:
                if pending.future.cancelled():
                    self._pending = None
                raise
            except Exception as exc:
                self._pending = None
                if pending.ticket != ticket:
                    logger.info("Discarding late read failure from ticket %d: %s", pending.ticket, exc)
                    continue
                logger.warning("Line source failed: %s", exc)
                raise InputUnavailableError(str(exc) or type(exc).__name__) from exc

            self._pending = None
            if pending.ticket != ticket:
                logger.info("Discarding late input from abandoned read (ticket %d)", pending.ticket)
                continue
            if line is None:
                self.exhausted = True
            return line
