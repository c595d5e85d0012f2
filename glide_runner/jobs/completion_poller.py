"""Completion poller that watches a job log for terminal markers under a timeout."""

from __future__ import annotations

import logging
from pathlib import Path

from glide_runner.adapters import IntervalWaiterPort, LogMarkerMatcherPort
from glide_runner.domain import FailureKind, Job, JobState, PollOutcome

from .interfaces import CompletionPollerPort, PollingPolicy

logger = logging.getLogger(__name__)


class LogCompletionPoller(CompletionPollerPort):
    """Poll a job log file on a fixed interval until a terminal state.

    Each tick checks the log for completion first, then for failure, then
    waits one interval. Tick 0 is the check at `elapsed == 0` before the
    first wait. `elapsed` grows by exactly one interval per wait with no
    wall-clock drift correction.
    """

    def __init__(self, marker_matcher: LogMarkerMatcherPort, waiter: IntervalWaiterPort):
        """Initialize poller collaborators.

        Args:
            marker_matcher: Classifies log text as completed or failed.
            waiter: Blocks between ticks and reports cancellation.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when collaborators are missing.
        """

        if marker_matcher is None:
            raise ValueError("marker_matcher must not be None")
        if waiter is None:
            raise ValueError("waiter must not be None")

        self._marker_matcher = marker_matcher
        self._waiter = waiter

    def poller_poll(self, job: Job, policy: PollingPolicy) -> PollOutcome:
        """Poll until completion, failure, timeout or cancellation.

        Args:
            job: Running job whose `log_path` is watched.
            policy: Timeout, interval and progress timing.

        Returns:
            PollOutcome: Terminal state with elapsed seconds and tick count.

        Raises:
            ValueError: Raised when the job is not in `RUNNING` state.
        """

        if job.state is not JobState.RUNNING:
            raise ValueError(f"job {job.name} must be running to poll, got {job.state.value}")

        elapsed_seconds = 0
        tick_count = 0
        while elapsed_seconds < policy.timeout_seconds:
            tick_count += 1
            log_text = self._poller_read_log(job.log_path)
            if log_text is not None:
                if self._marker_matcher.marker_matches_completion(log_text):
                    job.job_transition(JobState.COMPLETED)
                    return PollOutcome(
                        state=JobState.COMPLETED,
                        elapsed_seconds=elapsed_seconds,
                        tick_count=tick_count,
                        elapsed_time_line=self._marker_matcher.marker_extract_elapsed_line(log_text),
                    )
                if self._marker_matcher.marker_matches_failure(log_text):
                    job.job_transition(JobState.FAILED)
                    return PollOutcome(
                        state=JobState.FAILED,
                        elapsed_seconds=elapsed_seconds,
                        tick_count=tick_count,
                    )

            if not self._waiter.waiter_wait(policy.interval_seconds):
                job.job_transition(JobState.CANCELLED)
                return PollOutcome(
                    state=JobState.CANCELLED,
                    elapsed_seconds=elapsed_seconds,
                    tick_count=tick_count,
                )
            elapsed_seconds += policy.interval_seconds

            if elapsed_seconds % policy.progress_interval_seconds == 0:
                logger.info("  -> Still waiting... (%ss elapsed)", elapsed_seconds)

        job.job_transition(JobState.TIMED_OUT)
        return PollOutcome(
            state=JobState.TIMED_OUT,
            elapsed_seconds=elapsed_seconds,
            tick_count=tick_count,
        )

    def _poller_read_log(self, log_path: Path) -> str | None:
        """Read the full log text for one tick.

        Args:
            log_path: Log file path.

        Returns:
            str | None: Log text, or None when missing or unreadable this tick.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        try:
            return log_path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None
        except OSError as error:
            logger.warning("Could not read %s: %s", log_path, error)
            return None


def job_failure_kind_for_poll(outcome: PollOutcome) -> FailureKind | None:
    """Return the failure kind implied by a poll outcome.

    Args:
        outcome: Terminal poll outcome.

    Returns:
        FailureKind | None: `RUNTIME` for fatal-marker failures, otherwise None.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if outcome.state is JobState.FAILED:
        return FailureKind.RUNTIME
    return None
