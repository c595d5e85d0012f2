"""Main module entrypoint for command-line execution.

This module loads runner configuration, prepares job directories and runs
them sequentially with completion monitoring.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import signal
from dataclasses import asdict
from pathlib import Path
from typing import Sequence

from glide_runner.adapters import (
    EventIntervalWaiter,
    environment_resolve_installation_path,
    environment_validate,
    environment_validate_installation,
)
from glide_runner.bootstrap import bootstrap_create_runner
from glide_runner.config import (
    CONFIG_FILE_ENVIRONMENT_VARIABLE,
    RunnerSettings,
    SettingsLoadError,
    config_load_settings,
    config_resolve_file_path,
)
from glide_runner.domain import RunReport
from glide_runner.jobs import (
    JobRunAbortedError,
    JobRunnerError,
    PreparationReport,
    SchrodingerEnvironmentError,
    job_log_preparation_summary,
    job_prepare_directories,
    job_prepare_docking_jobs,
)

logger = logging.getLogger("glide_runner")

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def main(argv: Sequence[str] | None = None) -> None:
    """Run the selected command with validated configuration.

    Args:
        argv: Optional argument list, defaults to `sys.argv[1:]`.

    Returns:
        None: Returns normally on success.

    Raises:
        SystemExit: Raised with status 1 when jobs failed or the run could not start.
    """

    argument_parser = argparse.ArgumentParser(description="Sequential Schrodinger/Glide job runner")
    argument_parser.add_argument(
        "command",
        choices=("prepare", "prepare-docking", "run", "check-env"),
        help="`prepare` validates job directories, `prepare-docking` creates docking jobs from JSON, "
        "`run` prepares and executes all jobs sequentially, `check-env` validates the Schrodinger setup",
        type=str,
    )
    argument_parser.add_argument(
        "--config",
        dest="config_file",
        type=Path,
        help=f"JSON config file (default: ${CONFIG_FILE_ENVIRONMENT_VARIABLE} or ~/config.json)",
    )
    argument_parser.add_argument(
        "--combinations-file",
        dest="combinations_file",
        type=Path,
        help="Docking combination JSON file for `prepare-docking`",
    )
    argument_parser.add_argument(
        "--report-file",
        dest="report_file",
        type=Path,
        help="Optional JSON report written after `run`",
    )
    argument_parser.add_argument("--log-file", dest="log_file", type=Path, help="Append log lines to this file")
    argument_parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parsed_arguments = argument_parser.parse_args(argv)

    main_configure_logging(verbose=parsed_arguments.verbose, log_file=parsed_arguments.log_file)
    if parsed_arguments.config_file is not None:
        os.environ[CONFIG_FILE_ENVIRONMENT_VARIABLE] = str(parsed_arguments.config_file.expanduser())

    try:
        settings = main_load_settings()
        if parsed_arguments.command == "check-env":
            main_check_environment(settings)
            return
        if parsed_arguments.command == "prepare-docking":
            if parsed_arguments.combinations_file is None:
                argument_parser.error("prepare-docking requires --combinations-file")
            report = job_prepare_docking_jobs(parsed_arguments.combinations_file, settings)
            main_require_valid_jobs(report)
            return

        report = job_prepare_directories(
            settings.settings_jobs_directory(),
            remove_elements_flag=settings.docking.remove_elements_flag,
        )
        main_require_valid_jobs(report)
        if parsed_arguments.command == "prepare":
            return

        main_require_installation(settings)
        run_report = main_run_jobs(settings, report)
    except JobRunAbortedError as error:
        logger.error("ERROR: %s", error)
        if parsed_arguments.report_file is not None:
            main_write_report(error.run_report, parsed_arguments.report_file)
        raise SystemExit(1) from error
    except (SettingsLoadError, JobRunnerError) as error:
        logger.error("ERROR: %s", error)
        raise SystemExit(1) from error

    if parsed_arguments.report_file is not None:
        main_write_report(run_report, parsed_arguments.report_file)
    if not run_report.summary.run_summary_is_success():
        raise SystemExit(1)


def main_configure_logging(verbose: bool, log_file: Path | None) -> None:
    """Configure console (and optional file) logging for operator output."""

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=_LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def main_load_settings() -> RunnerSettings:
    """Load settings, warning when the JSON config file is absent.

    Returns:
        RunnerSettings: Validated settings.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
    """

    config_file = config_resolve_file_path()
    if not config_file.is_file():
        logger.warning("Configuration file not found: %s; using default settings", config_file)
    return config_load_settings()


def main_check_environment(settings: RunnerSettings) -> None:
    """Log Schrodinger environment problems.

    Args:
        settings: Validated settings.

    Returns:
        None: Returns when the environment looks usable.

    Raises:
        SystemExit: Raised with status 1 when any problem is found.
    """

    issues = environment_validate(settings.schrodinger)
    for issue in issues:
        logger.error("ERROR: %s", issue)
    if issues:
        raise SystemExit(1)
    logger.info(
        "Schrodinger environment ready: SCHRODINGER=%s",
        environment_resolve_installation_path(settings.schrodinger),
    )


def main_require_installation(settings: RunnerSettings) -> None:
    """Stop before any launch when the Schrodinger installation jobs would use is broken.

    Args:
        settings: Validated settings.

    Returns:
        None: Returns when `glide` is executable.

    Raises:
        SchrodingerEnvironmentError: Raised when the installation is missing or has no `glide`.
    """

    logger.info("Checking Schrodinger environment...")
    issues = environment_validate_installation(settings.schrodinger)
    if issues:
        raise SchrodingerEnvironmentError("; ".join(issues))


def main_require_valid_jobs(report: PreparationReport) -> None:
    """Log the preparation summary and stop when nothing can run.

    Raises:
        SystemExit: Raised with status 1 when no valid jobs were found.
    """

    job_log_preparation_summary(report)
    if not report.preparation_has_valid_jobs():
        logger.error("No valid jobs found. Nothing to run.")
        raise SystemExit(1)


def main_run_jobs(settings: RunnerSettings, report: PreparationReport) -> RunReport:
    """Run prepared jobs with SIGINT/SIGTERM wired to wait cancellation.

    Args:
        settings: Validated settings.
        report: Preparation result with valid jobs.

    Returns:
        RunReport: Final run report.

    Raises:
        JobRunAbortedError: Raised when a job directory becomes unusable mid-run.
    """

    waiter = EventIntervalWaiter()
    runner = bootstrap_create_runner(settings, waiter)

    def _cancel_on_signal(signal_number: int, _frame) -> None:
        logger.warning("Received %s, cancelling current job wait", signal.Signals(signal_number).name)
        waiter.waiter_cancel()

    previous_handlers = {
        signal_number: signal.signal(signal_number, _cancel_on_signal)
        for signal_number in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        return runner.runner_execute(report.valid_jobs)
    finally:
        for signal_number, previous_handler in previous_handlers.items():
            signal.signal(signal_number, previous_handler)


def main_write_report(run_report: RunReport, report_file: Path) -> None:
    """Write the run report as JSON."""

    report_file.write_text(json.dumps(asdict(run_report), indent=2, default=str) + "\n", encoding="utf-8")
    logger.info("Run report written to %s", report_file)


if __name__ == "__main__":
    main()
