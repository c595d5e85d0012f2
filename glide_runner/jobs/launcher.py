"""Job launcher that submits one job script as a foreground child process."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping
from typing import Final

from glide_runner.domain import Job

from .errors import JobDirectoryError
from .interfaces import JobLauncherPort

logger = logging.getLogger(__name__)

# Shell convention for "command could not be executed".
LAUNCH_OS_ERROR_EXIT_CODE: Final[int] = 127


class SubprocessJobLauncher(JobLauncherPort):
    """Launcher that runs the job script synchronously in its working directory.

    Standard output and error are inherited so the operator sees the
    submission-time output. The exit code only reflects submission, not the
    underlying computation.
    """

    def __init__(self, environment: Mapping[str, str] | None = None):
        """Initialize launcher.

        Args:
            environment: Full child-process environment, defaults to the current one.

        Returns:
            None: Initializer does not return a value.

        Raises:
            RuntimeError: This initializer does not raise runtime errors.
        """

        self._environment = dict(environment) if environment is not None else None

    def launcher_launch(self, job: Job) -> int:
        """Submit one job and return its exit code.

        Args:
            job: Pending job to submit.

        Returns:
            int: Child exit code, or 127 when the script could not be executed.

        Raises:
            JobDirectoryError: Raised when the working directory is missing or not enterable.
        """

        working_directory = job.working_directory
        if not working_directory.is_dir():
            raise JobDirectoryError(
                f"Failed to change to directory {working_directory}: directory does not exist",
                job_name=job.name,
                working_directory=working_directory,
            )
        if not os.access(working_directory, os.X_OK):
            raise JobDirectoryError(
                f"Failed to change to directory {working_directory}: permission denied",
                job_name=job.name,
                working_directory=working_directory,
            )

        logger.info("  -> Running %s...", job.executable.name)
        try:
            completed_process = subprocess.run(
                [str(job.executable.resolve())],
                cwd=str(working_directory),
                env=self._environment,
                check=False,
            )
        except OSError as error:
            logger.error("Could not execute %s: %s", job.executable, error)
            return LAUNCH_OS_ERROR_EXIT_CODE

        return completed_process.returncode
