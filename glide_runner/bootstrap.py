"""Runner bootstrap wiring from validated settings."""

from __future__ import annotations

from glide_runner.adapters import EventIntervalWaiter, SubstringMarkerMatcher, environment_build
from glide_runner.config import RunnerSettings
from glide_runner.jobs import LogCompletionPoller, PollingPolicy, SequentialJobRunner, SubprocessJobLauncher


def bootstrap_create_polling_policy(settings: RunnerSettings) -> PollingPolicy:
    """Build the poll timing policy from the `jobs` settings section.

    Args:
        settings: Validated runner settings.

    Returns:
        PollingPolicy: Timeout, interval and progress timing.

    Raises:
        ValueError: Raised when timing values are out of range.
    """

    return PollingPolicy(
        timeout_seconds=settings.jobs.timeout,
        interval_seconds=settings.jobs.check_interval,
        progress_interval_seconds=settings.jobs.progress_interval,
    )


def bootstrap_create_marker_matcher(settings: RunnerSettings) -> SubstringMarkerMatcher:
    """Build the log marker matcher from the `markers` settings section."""

    return SubstringMarkerMatcher(
        completion_markers=settings.markers.completion,
        failure_markers=settings.markers.failure,
        elapsed_time_marker=settings.markers.elapsed_time,
    )


def bootstrap_create_runner(settings: RunnerSettings, waiter: EventIntervalWaiter) -> SequentialJobRunner:
    """Assemble the sequential runner.

    Args:
        settings: Validated runner settings.
        waiter: Cancellable waiter shared with the signal handlers.

    Returns:
        SequentialJobRunner: Fully wired runner instance.

    Raises:
        ValueError: Raised when settings produce an invalid policy or matcher.
    """

    launcher = SubprocessJobLauncher(environment=environment_build(settings.schrodinger))
    poller = LogCompletionPoller(marker_matcher=bootstrap_create_marker_matcher(settings), waiter=waiter)
    return SequentialJobRunner(
        launcher=launcher,
        poller=poller,
        policy=bootstrap_create_polling_policy(settings),
        is_cancelled=waiter.waiter_is_cancelled,
    )
