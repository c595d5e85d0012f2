"""Project-native typed exceptions for job preparation and execution."""

from __future__ import annotations

from pathlib import Path

from glide_runner.domain import RunReport


class JobRunnerError(Exception):
    """Base exception for structural runner failures."""


class JobDirectoryError(JobRunnerError):
    """Job working directory is missing or not enterable; aborts the run.

    Attributes:
        job_name: Job whose directory failed.
        working_directory: Offending directory path.
    """

    def __init__(self, message: str, job_name: str, working_directory: Path):
        super().__init__(message)
        self.job_name = job_name
        self.working_directory = working_directory


class JobRunAbortedError(JobRunnerError):
    """Run stopped by a structural failure after some jobs may have finished.

    Attributes:
        run_report: Report for the jobs recorded before the abort; the job
            that triggered it is listed in `not_started`.
    """

    def __init__(self, message: str, run_report: RunReport):
        super().__init__(message)
        self.run_report = run_report


class JobPreparationError(JobRunnerError, ValueError):
    """Preparation input cannot be used (missing directories, invalid combination file)."""


class SchrodingerEnvironmentError(JobRunnerError):
    """Schrodinger installation is not usable, so no job can be launched."""
