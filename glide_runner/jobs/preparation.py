"""Job directory preparation: validation, Glide grid patching and executable bits."""

from __future__ import annotations

import logging
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from glide_runner.domain import Job

from .errors import JobPreparationError

logger = logging.getLogger(__name__)

ELEMENTS_FLAG: Final[str] = "-elements"
DOCKING_FLAGS: Final[tuple[str, ...]] = ("-dock", "-ligand")


@dataclass(frozen=True)
class InvalidJobDirectory:
    """Job directory rejected during preparation.

    Attributes:
        name: Directory base name.
        reason: Human-readable rejection reason.
    """

    name: str
    reason: str


@dataclass(frozen=True)
class PreparationReport:
    """Result payload of a preparation pass.

    Attributes:
        valid_jobs: Pending jobs ready to run, in directory-name order.
        invalid_directories: Rejected directories with reasons.
        patched_jobs: Names of jobs whose script or input was patched.
    """

    valid_jobs: tuple[Job, ...]
    invalid_directories: tuple[InvalidJobDirectory, ...]
    patched_jobs: tuple[str, ...] = ()

    def preparation_has_valid_jobs(self) -> bool:
        """Return whether at least one job can run."""

        return bool(self.valid_jobs)


def job_prepare_directories(jobs_directory: Path, remove_elements_flag: bool = True) -> PreparationReport:
    """Validate and prepare every job directory below `jobs_directory`.

    Args:
        jobs_directory: Directory whose immediate subdirectories are jobs.
        remove_elements_flag: Whether `-elements` is stripped from Glide grid scripts.

    Returns:
        PreparationReport: Valid jobs and rejected directories.

    Raises:
        JobPreparationError: Raised when the jobs directory does not exist.
    """

    if not jobs_directory.is_dir():
        raise JobPreparationError(f"Jobs directory not found: {jobs_directory}")

    valid_jobs: list[Job] = []
    invalid_directories: list[InvalidJobDirectory] = []
    patched_jobs: list[str] = []

    for job_directory in sorted(path for path in jobs_directory.iterdir() if path.is_dir()):
        logger.info("Processing job directory: %s", job_directory.name)
        try:
            job, patched = job_prepare_directory(job_directory, remove_elements_flag=remove_elements_flag)
        except JobPreparationError as error:
            logger.error("  ERROR: %s", error)
            invalid_directories.append(InvalidJobDirectory(name=job_directory.name, reason=str(error)))
            continue
        valid_jobs.append(job)
        if patched:
            patched_jobs.append(job.name)

    return PreparationReport(
        valid_jobs=tuple(valid_jobs),
        invalid_directories=tuple(invalid_directories),
        patched_jobs=tuple(patched_jobs),
    )


def job_prepare_directory(job_directory: Path, remove_elements_flag: bool = True) -> tuple[Job, bool]:
    """Prepare one job directory.

    Args:
        job_directory: Directory holding exactly one `.sh` script.
        remove_elements_flag: Whether `-elements` is stripped from Glide grid scripts.

    Returns:
        tuple[Job, bool]: Pending job and whether its script was patched.

    Raises:
        JobPreparationError: Raised when the directory has no or several scripts,
            or the script cannot be patched or made executable.
    """

    script_paths = sorted(path for path in job_directory.glob("*.sh") if path.is_file())
    if not script_paths:
        raise JobPreparationError(f"No .sh files found in {job_directory.name}")
    if len(script_paths) > 1:
        script_names = ", ".join(path.name for path in script_paths)
        raise JobPreparationError(f"Multiple .sh files found in {job_directory.name}: {script_names}")

    script_path = script_paths[0]
    logger.info("  Found script: %s", script_path.name)

    patched = False
    script_text = _job_read_script(script_path)
    if job_is_glide_grid_script(script_text):
        logger.info("  Detected Glide grid generation job")
        if remove_elements_flag:
            patched = job_remove_elements_flag(script_path)

    try:
        job_make_executable(script_path)
    except OSError as error:
        raise JobPreparationError(f"Failed to make executable: {script_path.name} ({error})") from error
    logger.info("  Made executable: %s", script_path.name)

    return Job.job_from_script(script_path), patched


def job_is_glide_grid_script(script_text: str) -> bool:
    """Return whether a script looks like a Glide grid generation job.

    Grid jobs invoke glide without docking (`-dock`) or ligand (`-ligand`) flags.

    Args:
        script_text: Submission script contents.

    Returns:
        bool: True for grid generation scripts.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if "glide" not in script_text:
        return False
    return not any(flag in script_text for flag in DOCKING_FLAGS)


def job_remove_elements_flag(script_path: Path) -> bool:
    """Strip the license-problematic ` -elements` flag from a script.

    Args:
        script_path: Script to patch in place.

    Returns:
        bool: True when the flag was found and removed.

    Raises:
        JobPreparationError: Raised when the flag is still present after patching.
    """

    script_text = _job_read_script(script_path)
    if ELEMENTS_FLAG not in script_text:
        return False

    logger.info("  Found %s flag (causes license issues) - removing...", ELEMENTS_FLAG)
    patched_text = script_text.replace(f" {ELEMENTS_FLAG}", "")
    if ELEMENTS_FLAG in patched_text:
        raise JobPreparationError(f"Failed to remove {ELEMENTS_FLAG} flag from {script_path.name}")

    try:
        script_path.write_text(patched_text, encoding="utf-8")
    except OSError as error:
        raise JobPreparationError(f"Failed to patch {script_path.name}: {error}") from error
    logger.info("  Successfully removed %s flag", ELEMENTS_FLAG)
    return True


def job_make_executable(script_path: Path) -> None:
    """Add user, group and other execute bits, like `chmod +x`."""

    current_mode = script_path.stat().st_mode
    script_path.chmod(current_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def job_log_preparation_summary(report: PreparationReport) -> None:
    """Log valid/invalid counts and rejected directory names.

    Args:
        report: Preparation result.

    Returns:
        None: Writes log lines as side effect.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    logger.info("=== PREPARATION SUMMARY ===")
    logger.info("Valid jobs found: %s", len(report.valid_jobs))
    logger.info("Invalid jobs found: %s", len(report.invalid_directories))
    if report.patched_jobs:
        logger.info("Patched jobs: %s", ", ".join(report.patched_jobs))
    for invalid_directory in report.invalid_directories:
        logger.warning("   %s: %s", invalid_directory.name, invalid_directory.reason)


def _job_read_script(script_path: Path) -> str:
    try:
        return script_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise JobPreparationError(f"Failed to read {script_path.name}: {error}") from error
