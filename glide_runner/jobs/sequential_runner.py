"""Sequential job runner: launch, poll and record one job at a time."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Callable

from glide_runner.domain import (
    FailureKind,
    Job,
    JobOutcome,
    JobState,
    PollOutcome,
    RunReport,
    RunSummary,
    domain_build_stage_event,
)

from .completion_poller import job_failure_kind_for_poll
from .errors import JobDirectoryError, JobRunAbortedError
from .interfaces import CompletionPollerPort, JobLauncherPort, PollingPolicy
from .run_summary import RunSummaryAggregator

logger = logging.getLogger(__name__)


class SequentialJobRunner:
    """Run jobs strictly one after another in input order.

    Job N's terminal state is recorded before job N+1 is launched. Per-job
    failures are contained in the summary. A `JobDirectoryError` aborts the
    run with a partial report, and once cancellation is requested no further
    job is launched.
    """

    def __init__(
        self,
        launcher: JobLauncherPort,
        poller: CompletionPollerPort,
        policy: PollingPolicy,
        clock: Callable[[], float] | None = None,
        is_cancelled: Callable[[], bool] | None = None,
    ):
        """Initialize runner dependencies.

        Args:
            launcher: Submits one job process.
            poller: Waits for a running job's terminal state.
            policy: Poll timing applied to every job.
            clock: Monotonic clock for wall-clock durations.
            is_cancelled: Reports whether the run was cancelled, checked before each launch.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are missing.
        """

        if launcher is None:
            raise ValueError("launcher must not be None")
        if poller is None:
            raise ValueError("poller must not be None")
        if policy is None:
            raise ValueError("policy must not be None")

        self._launcher = launcher
        self._poller = poller
        self._policy = policy
        self._clock = clock or time.monotonic
        self._is_cancelled = is_cancelled or (lambda: False)

    def runner_execute(self, jobs: Sequence[Job]) -> RunReport:
        """Execute all jobs sequentially and return the run report.

        Args:
            jobs: Pending jobs in execution order.

        Returns:
            RunReport: Final summary, ordered outcomes, jobs not started and stage timeline.

        Raises:
            JobRunAbortedError: Raised when a job directory is unusable; carries the
                partial report and remaining jobs are not run.
        """

        aggregator = RunSummaryAggregator()
        outcomes: list[JobOutcome] = []
        timeline: list[dict[str, object]] = [
            domain_build_stage_event(stage="run", status="started", details={"job_count": len(jobs)})
        ]
        total_jobs = len(jobs)
        not_started: tuple[str, ...] = ()
        cancelled = False

        for job_index, job in enumerate(jobs):
            if self._is_cancelled():
                cancelled = True
                not_started = tuple(remaining.name for remaining in jobs[job_index:])
                break

            logger.info("Starting job %s of %s: %s", job_index + 1, total_jobs, job.name)
            logger.info("  -> Directory: %s", job.working_directory)

            try:
                outcome = self._runner_execute_job(job=job, timeline=timeline)
            except JobDirectoryError as error:
                logger.error("%s", error)
                not_started = tuple(remaining.name for remaining in jobs[job_index:])
                logger.error("Run aborted; jobs not started: %s", ", ".join(not_started))
                timeline.append(
                    domain_build_stage_event(
                        stage="run",
                        status="aborted",
                        job_name=job.name,
                        details={
                            "error_type": type(error).__name__,
                            "error_message": str(error),
                            "not_started": list(not_started),
                        },
                    )
                )
                run_report = self._runner_finish(aggregator, outcomes, not_started, timeline)
                raise JobRunAbortedError(str(error), run_report=run_report) from error

            aggregator.summary_record(outcome.state, outcome.failure_kind)
            outcomes.append(outcome)
            logger.info("")

            if outcome.state is JobState.CANCELLED:
                cancelled = True
                not_started = tuple(remaining.name for remaining in jobs[job_index + 1 :])
                break

        if cancelled or self._is_cancelled():
            if not_started:
                logger.warning("Run cancelled; jobs not started: %s", ", ".join(not_started))
            timeline.append(
                domain_build_stage_event(stage="run", status="cancelled", details={"not_started": list(not_started)})
            )
        else:
            timeline.append(domain_build_stage_event(stage="run", status="completed"))
        return self._runner_finish(aggregator, outcomes, not_started, timeline)

    def _runner_execute_job(self, job: Job, timeline: list[dict[str, object]]) -> JobOutcome:
        """Launch one job and, when submitted, poll it to a terminal state.

        Args:
            job: Pending job.
            timeline: Mutable run timeline.

        Returns:
            JobOutcome: Terminal outcome for the job.

        Raises:
            JobDirectoryError: Raised by the launcher for unusable directories.
        """

        started_at = self._clock()
        timeline.append(domain_build_stage_event(stage="launch", status="started", job_name=job.name))
        exit_code = self._launcher.launcher_launch(job)

        if exit_code != 0:
            job.job_transition(JobState.FAILED)
            logger.error("Job submission failed with exit code: %s", exit_code)
            timeline.append(
                domain_build_stage_event(
                    stage="launch",
                    status="failed",
                    job_name=job.name,
                    details={"exit_code": exit_code},
                )
            )
            return JobOutcome(
                job_name=job.name,
                state=JobState.FAILED,
                failure_kind=FailureKind.SUBMISSION,
                exit_code=exit_code,
                elapsed_seconds=0,
                elapsed_time_line=None,
                duration_seconds=self._runner_duration_since(started_at),
            )

        job.job_transition(JobState.RUNNING)
        timeline.append(domain_build_stage_event(stage="launch", status="completed", job_name=job.name))
        logger.info("  -> Job submitted, waiting for completion...")

        timeline.append(domain_build_stage_event(stage="poll", status="started", job_name=job.name))
        poll_outcome = self._poller.poller_poll(job, self._policy)
        timeline.append(
            domain_build_stage_event(
                stage="poll",
                status=poll_outcome.state.value,
                job_name=job.name,
                details={"elapsed_seconds": poll_outcome.elapsed_seconds, "tick_count": poll_outcome.tick_count},
            )
        )

        outcome = JobOutcome(
            job_name=job.name,
            state=poll_outcome.state,
            failure_kind=job_failure_kind_for_poll(poll_outcome),
            exit_code=exit_code,
            elapsed_seconds=poll_outcome.elapsed_seconds,
            elapsed_time_line=poll_outcome.elapsed_time_line,
            duration_seconds=self._runner_duration_since(started_at),
        )
        self._runner_announce_outcome(job=job, poll_outcome=poll_outcome, outcome=outcome)
        return outcome

    def _runner_announce_outcome(self, job: Job, poll_outcome: PollOutcome, outcome: JobOutcome) -> None:
        """Log the operator status line for a polled job."""

        if poll_outcome.state is JobState.COMPLETED:
            logger.info("Job completed successfully: %s", job.name)
            if poll_outcome.elapsed_time_line:
                logger.info("  -> %s", poll_outcome.elapsed_time_line)
            logger.info("  -> Script duration: %ss", int(outcome.duration_seconds))
        elif poll_outcome.state is JobState.FAILED:
            logger.error("Job failed - check %s for details", job.log_path.name)
        elif poll_outcome.state is JobState.TIMED_OUT:
            logger.error("Job timed out after %ss: %s", self._policy.timeout_seconds, job.name)
        else:
            logger.warning("Job cancelled after %ss: %s", poll_outcome.elapsed_seconds, job.name)

    def _runner_finish(
        self,
        aggregator: RunSummaryAggregator,
        outcomes: list[JobOutcome],
        not_started: tuple[str, ...],
        timeline: list[dict[str, object]],
    ) -> RunReport:
        summary = aggregator.summary_finalize()
        job_log_run_summary(summary)
        return RunReport(
            summary=summary,
            outcomes=tuple(outcomes),
            not_started=not_started,
            timeline=timeline,
        )

    def _runner_duration_since(self, started_at: float) -> float:
        return max(0.0, self._clock() - started_at)


def job_log_run_summary(summary: RunSummary) -> None:
    """Log the final run tally for the operator console.

    Args:
        summary: Final run summary.

    Returns:
        None: Writes log lines as side effect.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    logger.info("=== JOB RUNNER SUMMARY ===")
    logger.info("Total jobs: %s", summary.total)
    logger.info("Completed successfully: %s", summary.completed)
    logger.info("Failed: %s", summary.failed)
    if summary.failed:
        logger.info(
            "  -> submission: %s, runtime: %s, timed out: %s, cancelled: %s",
            summary.submission_failed,
            summary.runtime_failed,
            summary.timed_out,
            summary.cancelled,
        )

    if summary.run_summary_is_success():
        logger.info("All jobs completed successfully!")
    else:
        logger.warning("Some jobs failed.")
