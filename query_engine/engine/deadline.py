"""
Request deadline handling.

A Deadline bounds all database work of one request. Waiting for a pooled
connection uses the remaining time as timeout; statements already running
on the server are cancelled by a timer when the deadline passes.
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator

import psycopg

from ..errors import DeadlineExceeded

logger = logging.getLogger(__name__)


class Deadline:
    """Absolute point in time after which a request must stop."""

    def __init__(self, timeout: float, clock: Callable[[], float] = time.monotonic):
        self.timeout = timeout
        self._clock = clock
        self._expires_at = clock() + timeout

    def remaining(self) -> float:
        """Seconds left before the deadline, never negative."""
        return max(self._expires_at - self._clock(), 0.0)

    @property
    def expired(self) -> bool:
        return self._clock() >= self._expires_at

    def check(self, action: str) -> None:
        """
        Raise if the deadline has already passed.

        Args:
            action: What was about to run, used in the message
        """
        if self.expired:
            raise DeadlineExceeded(f"{action}: deadline of {self.timeout}s exceeded")

    @contextmanager
    def watch(self, connection: psycopg.Connection) -> Iterator[None]:
        """
        Cancel whatever ``connection`` is running once the deadline passes.

        The watch is disarmed on exit, before the caller hands the
        connection back to the pool.
        """
        canceller = _StatementCanceller(connection)
        timer = threading.Timer(self.remaining(), canceller.fire)
        timer.daemon = True
        timer.start()
        try:
            yield
        finally:
            canceller.disarm()
            timer.cancel()


class _StatementCanceller:
    """One-shot cancellation of the statement running on a connection."""

    def __init__(self, connection: psycopg.Connection):
        self._connection = connection
        self._armed = True
        self._lock = threading.Lock()

    def fire(self) -> None:
        with self._lock:
            if not self._armed:
                return
            self._armed = False
            logger.warning("Request deadline exceeded, cancelling running statement")
            try:
                self._connection.cancel_safe()
            except psycopg.Error as e:
                logger.warning(f"Failed to cancel running statement: {str(e)}")

    def disarm(self) -> None:
        with self._lock:
            self._armed = False
