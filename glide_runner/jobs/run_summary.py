"""Run summary aggregation over a sequence of terminal job states."""

from __future__ import annotations

from dataclasses import replace

from glide_runner.domain import FailureKind, JobState, RunSummary, TERMINAL_JOB_STATES


class RunSummaryAggregator:
    """Accumulate terminal job states in strict sequence order.

    The aggregator is owned by the single control loop; counts are never
    shared across threads.
    """

    def __init__(self):
        self._summary = RunSummary()

    def summary_record(self, state: JobState, failure_kind: FailureKind | None = None) -> RunSummary:
        """Record one job's terminal state.

        Args:
            state: Terminal job state.
            failure_kind: Origin of a `FAILED` state; `RUNTIME` when omitted.

        Returns:
            RunSummary: Counts after recording this job.

        Raises:
            ValueError: Raised when state is not terminal, or a failure kind is
                given for a non-failed state.
        """

        if state not in TERMINAL_JOB_STATES:
            raise ValueError(f"cannot record non-terminal state {state.value}")
        if failure_kind is not None and state is not JobState.FAILED:
            raise ValueError("failure_kind is only valid for failed jobs")

        summary = self._summary
        if state is JobState.COMPLETED:
            summary = replace(summary, completed=summary.completed + 1)
        elif state is JobState.FAILED:
            summary = replace(summary, failed=summary.failed + 1)
            if failure_kind is FailureKind.SUBMISSION:
                summary = replace(summary, submission_failed=summary.submission_failed + 1)
            else:
                summary = replace(summary, runtime_failed=summary.runtime_failed + 1)
        elif state is JobState.TIMED_OUT:
            summary = replace(summary, failed=summary.failed + 1, timed_out=summary.timed_out + 1)
        else:
            summary = replace(summary, failed=summary.failed + 1, cancelled=summary.cancelled + 1)

        self._summary = replace(summary, total=summary.total + 1)
        return self._summary

    def summary_finalize(self) -> RunSummary:
        """Return the current tally; repeated calls yield equal values."""

        return self._summary
