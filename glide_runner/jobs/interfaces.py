"""Typed interfaces for job-layer execution responsibilities."""

from dataclasses import dataclass
from typing import Protocol

from glide_runner.domain import Job, PollOutcome


@dataclass(frozen=True)
class PollingPolicy:
    """Completion polling timing, all values in whole seconds.

    Attributes:
        timeout_seconds: Maximum accumulated wait before timing out.
        interval_seconds: Wait between two marker checks.
        progress_interval_seconds: Accumulated wait between progress notices.
    """

    timeout_seconds: int = 3600
    interval_seconds: int = 30
    progress_interval_seconds: int = 300

    def __post_init__(self) -> None:
        if self.timeout_seconds < 0:
            raise ValueError("timeout_seconds must be >= 0")
        if self.interval_seconds < 1:
            raise ValueError("interval_seconds must be >= 1")
        if self.progress_interval_seconds < 1:
            raise ValueError("progress_interval_seconds must be >= 1")


class JobLauncherPort(Protocol):
    """Port definition for submitting one job process."""

    def launcher_launch(self, job: Job) -> int:
        """Run the job executable and return its submission exit code.

        Args:
            job: Pending job to submit.

        Returns:
            int: Child exit code; zero means the submission was accepted.

        Raises:
            JobDirectoryError: Raised when the working directory is unusable.
        """


class CompletionPollerPort(Protocol):
    """Port definition for waiting on a running job's terminal state."""

    def poller_poll(self, job: Job, policy: PollingPolicy) -> PollOutcome:
        """Poll the job log until a terminal state is reached.

        Args:
            job: Running job.
            policy: Timing policy for the poll loop.

        Returns:
            PollOutcome: Terminal state and loop counters.

        Raises:
            ValueError: Raised when the job is not running.
        """
