"""Typed interfaces for adapter-layer responsibilities."""

from typing import Protocol


class LogMarkerMatcherPort(Protocol):
    """Port definition for classifying job log text by marker phrases."""

    def marker_matches_completion(self, text: str) -> bool:
        """Return whether log text signals a completed job.

        Args:
            text: Full log text read so far.

        Returns:
            bool: True when every completion marker is present.

        Raises:
            RuntimeError: Raised when matching cannot be performed.
        """

    def marker_matches_failure(self, text: str) -> bool:
        """Return whether log text signals a fatal job failure.

        Args:
            text: Full log text read so far.

        Returns:
            bool: True when any failure marker is present.

        Raises:
            RuntimeError: Raised when matching cannot be performed.
        """

    def marker_extract_elapsed_line(self, text: str) -> str | None:
        """Return the human-readable elapsed-time line, if the log has one.

        Args:
            text: Full log text read so far.

        Returns:
            str | None: Last elapsed-time line, or None when absent.

        Raises:
            RuntimeError: Raised when extraction cannot be performed.
        """


class IntervalWaiterPort(Protocol):
    """Port definition for the wait between two poll ticks."""

    def waiter_wait(self, seconds: int) -> bool:
        """Block for one poll interval.

        Args:
            seconds: Interval length in seconds.

        Returns:
            bool: True when the full interval elapsed, False when cancelled.

        Raises:
            ValueError: Raised when seconds is negative.
        """

    def waiter_cancel(self) -> None:
        """Interrupt the current and all later waits.

        Returns:
            None: Cancellation is recorded as side effect.

        Raises:
            RuntimeError: Raised when cancellation cannot be signalled.
        """
