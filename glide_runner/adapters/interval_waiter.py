"""Cancellable fixed-interval waiter used between poll ticks."""

from __future__ import annotations

import threading

from .interfaces import IntervalWaiterPort


class EventIntervalWaiter(IntervalWaiterPort):
    """Interval waiter backed by `threading.Event`.

    A cancel (for example from a signal handler) wakes the current wait and
    makes every later wait return immediately.
    """

    def __init__(self, cancel_event: threading.Event | None = None):
        self._cancel_event = cancel_event or threading.Event()

    def waiter_wait(self, seconds: int) -> bool:
        """Block for `seconds` unless cancelled.

        Args:
            seconds: Interval length in seconds.

        Returns:
            bool: True when the full interval elapsed, False when cancelled.

        Raises:
            ValueError: Raised when seconds is negative.
        """

        if seconds < 0:
            raise ValueError("seconds must be >= 0")
        if self._cancel_event.is_set():
            return False
        return not self._cancel_event.wait(timeout=seconds)

    def waiter_cancel(self) -> None:
        self._cancel_event.set()

    def waiter_is_cancelled(self) -> bool:
        """Return whether cancellation was requested."""

        return self._cancel_event.is_set()
