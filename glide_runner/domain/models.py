"""Typed domain models shared across runner layers.

This module provides the job lifecycle contract, per-job outcomes and the
aggregate run summary used by the launcher, poller and sequential runner.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final


class JobState(str, Enum):
    """Lifecycle states of one tracked job."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


class FailureKind(str, Enum):
    """Origin of a `FAILED` job state."""

    SUBMISSION = "submission"
    RUNTIME = "runtime"


TERMINAL_JOB_STATES: Final[frozenset[JobState]] = frozenset(
    {JobState.COMPLETED, JobState.FAILED, JobState.TIMED_OUT, JobState.CANCELLED}
)

_ALLOWED_JOB_TRANSITIONS: Final[dict[JobState, frozenset[JobState]]] = {
    JobState.PENDING: frozenset({JobState.RUNNING, JobState.FAILED}),
    JobState.RUNNING: frozenset({JobState.COMPLETED, JobState.FAILED, JobState.TIMED_OUT, JobState.CANCELLED}),
}


@dataclass
class Job:
    """One unit of external work tracked by the runner.

    Attributes:
        name: Unique job identifier derived from its directory name.
        working_directory: Directory the child process runs in.
        executable: Script invoked to submit the job.
        log_path: Text log appended by the external tool; may not exist yet.
        state: Current lifecycle state.
    """

    name: str
    working_directory: Path
    executable: Path
    log_path: Path
    state: JobState = JobState.PENDING

    @classmethod
    def job_from_script(cls, script_path: Path) -> "Job":
        """Build a pending job from its single submission script.

        Args:
            script_path: Path to the job's `.sh` script.

        Returns:
            Job: Pending job rooted at the script's parent directory.

        Raises:
            RuntimeError: This factory does not raise runtime errors.
        """

        working_directory = script_path.parent
        job_name = working_directory.name
        return cls(
            name=job_name,
            working_directory=working_directory,
            executable=script_path,
            log_path=working_directory / f"{job_name}.log",
        )

    def job_is_terminal(self) -> bool:
        """Return whether the job reached a terminal state."""

        return self.state in TERMINAL_JOB_STATES

    def job_transition(self, new_state: JobState) -> None:
        """Move the job forward to a new lifecycle state.

        Args:
            new_state: Target state.

        Returns:
            None: Updates `state` as side effect.

        Raises:
            ValueError: Raised when the transition is not a forward lifecycle step.
        """

        allowed_states = _ALLOWED_JOB_TRANSITIONS.get(self.state, frozenset())
        if new_state not in allowed_states:
            raise ValueError(f"invalid job state transition for {self.name}: {self.state.value} -> {new_state.value}")
        self.state = new_state


@dataclass(frozen=True)
class PollOutcome:
    """Terminal result of one completion polling loop.

    Attributes:
        state: Terminal state reached by the poller.
        elapsed_seconds: Accumulated interval seconds when polling stopped.
        tick_count: Number of marker checks performed.
        elapsed_time_line: Last elapsed-time line from the log, when completed.
    """

    state: JobState
    elapsed_seconds: int
    tick_count: int
    elapsed_time_line: str | None = None


@dataclass(frozen=True)
class JobOutcome:
    """Recorded outcome of one job in a run.

    Attributes:
        job_name: Job identifier.
        state: Terminal job state.
        failure_kind: Failure origin for `FAILED` jobs, otherwise None.
        exit_code: Submission exit code, when the job was launched.
        elapsed_seconds: Poll-loop elapsed seconds.
        elapsed_time_line: Tool-reported elapsed time line, when available.
        duration_seconds: Wall-clock seconds from launch to terminal state.
    """

    job_name: str
    state: JobState
    failure_kind: FailureKind | None
    exit_code: int | None
    elapsed_seconds: int
    elapsed_time_line: str | None
    duration_seconds: float


@dataclass(frozen=True)
class RunSummary:
    """Aggregate outcome counts over an ordered sequence of jobs.

    `failed` counts failed, timed-out and cancelled jobs, so
    `total == completed + failed` always holds.

    Attributes:
        total: Number of recorded jobs.
        completed: Number of completed jobs.
        failed: Number of jobs that did not complete.
        submission_failed: Jobs whose submission exit code was non-zero.
        runtime_failed: Jobs whose log reported a fatal marker.
        timed_out: Jobs that reached the polling timeout.
        cancelled: Jobs interrupted by an operator cancel.
    """

    total: int = 0
    completed: int = 0
    failed: int = 0
    submission_failed: int = 0
    runtime_failed: int = 0
    timed_out: int = 0
    cancelled: int = 0

    def run_summary_is_success(self) -> bool:
        """Return whether no recorded job failed."""

        return self.failed == 0


@dataclass(frozen=True)
class RunReport:
    """Final report of one sequential runner invocation.

    Attributes:
        summary: Final outcome tally.
        outcomes: Ordered per-job outcomes.
        not_started: Names of jobs skipped after a cancellation.
        timeline: Structured stage events captured during the run.
    """

    summary: RunSummary
    outcomes: tuple[JobOutcome, ...]
    not_started: tuple[str, ...]
    timeline: list[dict[str, object]]
