"""Docking job preparation from a JSON list of ligand/grid combinations."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Final

from pydantic import BaseModel, Field, ValidationError

from glide_runner.config import DockingSettings, RunnerSettings
from glide_runner.domain import Job

from .errors import JobPreparationError
from .preparation import InvalidJobDirectory, PreparationReport, job_make_executable

logger = logging.getLogger(__name__)

LIGAND_FILE_SUFFIXES: Final[tuple[str, ...]] = (".sdf", ".mol", ".mol2", ".mae", ".sdf.gz", ".mae.gz")
GRID_FILE_SUFFIXES: Final[tuple[str, ...]] = (".zip", ".grd")
DOCKING_SCRIPT_NAME: Final[str] = "run_docking.sh"
_ELEMENTS_LINE_PATTERN: Final[re.Pattern[str]] = re.compile(r"[Ee]lements|ELEMENTS")


class DockingCombination(BaseModel):
    """One ligand/grid pair to dock as its own job."""

    ligand: str = Field(min_length=1)
    grid: str = Field(min_length=1)
    job_name: str = Field(min_length=1, pattern=r"^[A-Za-z0-9._-]+$")


class DockingCombinationFile(BaseModel):
    """Top-level docking combination document."""

    docking_combinations: list[DockingCombination]


def job_load_docking_combinations(combinations_file: Path) -> list[DockingCombination]:
    """Load and validate a docking combination JSON file.

    Args:
        combinations_file: Path to the JSON document.

    Returns:
        list[DockingCombination]: Validated combinations in file order.

    Raises:
        JobPreparationError: Raised when the file is missing, unreadable or invalid.
    """

    if not combinations_file.is_file():
        raise JobPreparationError(f"JSON input file not found: {combinations_file}")
    try:
        payload = combinations_file.read_text(encoding="utf-8")
        return DockingCombinationFile.model_validate_json(payload).docking_combinations
    except OSError as error:
        raise JobPreparationError(f"Failed to read {combinations_file}: {error}") from error
    except ValidationError as error:
        raise JobPreparationError(f"Invalid docking combination file {combinations_file}: {error}") from error


def job_prepare_docking_jobs(combinations_file: Path, settings: RunnerSettings) -> PreparationReport:
    """Create one docking job directory per valid combination.

    Args:
        combinations_file: JSON document with `docking_combinations`.
        settings: Runner settings (directories and docking defaults).

    Returns:
        PreparationReport: Created jobs and rejected combinations.

    Raises:
        JobPreparationError: Raised when the input file, ligands directory or
            grids directory is unusable.
    """

    ligands_directory = settings.settings_ligands_directory()
    grids_directory = settings.settings_grids_directory()
    jobs_directory = settings.settings_jobs_directory()

    combinations = job_load_docking_combinations(combinations_file)
    if not ligands_directory.is_dir():
        raise JobPreparationError(f"Ligands directory not found: {ligands_directory}")
    if not grids_directory.is_dir():
        raise JobPreparationError(f"Grids directory not found: {grids_directory}")
    jobs_directory.mkdir(parents=True, exist_ok=True)

    valid_jobs: list[Job] = []
    invalid_directories: list[InvalidJobDirectory] = []
    patched_jobs: list[str] = []

    for combination in combinations:
        logger.info("Processing docking job: %s", combination.job_name)
        logger.info("  -> Ligand: %s", combination.ligand)
        logger.info("  -> Grid: %s", combination.grid)
        try:
            job, patched = job_prepare_docking_job(
                combination=combination,
                ligand_path=ligands_directory / combination.ligand,
                grid_path=grids_directory / combination.grid,
                jobs_directory=jobs_directory,
                docking=settings.docking,
            )
        except JobPreparationError as error:
            logger.error("  ERROR: %s", error)
            invalid_directories.append(InvalidJobDirectory(name=combination.job_name, reason=str(error)))
            continue
        valid_jobs.append(job)
        if patched:
            patched_jobs.append(job.name)

    return PreparationReport(
        valid_jobs=tuple(valid_jobs),
        invalid_directories=tuple(invalid_directories),
        patched_jobs=tuple(patched_jobs),
    )


def job_prepare_docking_job(
    combination: DockingCombination,
    ligand_path: Path,
    grid_path: Path,
    jobs_directory: Path,
    docking: DockingSettings,
) -> tuple[Job, bool]:
    """Write the input file, execution script and saved config for one combination.

    Args:
        combination: Ligand/grid pair.
        ligand_path: Absolute ligand file path.
        grid_path: Absolute grid file path.
        jobs_directory: Parent of the job directory to create.
        docking: Docking defaults.

    Returns:
        tuple[Job, bool]: Pending job and whether elements settings were stripped.

    Raises:
        JobPreparationError: Raised when inputs are missing or unsupported, or
            files cannot be written.
    """

    job_validate_input_file(ligand_path, LIGAND_FILE_SUFFIXES, label="Ligand")
    job_validate_input_file(grid_path, GRID_FILE_SUFFIXES, label="Grid")

    job_name = combination.job_name
    job_directory = jobs_directory / job_name
    input_path = job_directory / f"{job_name}.in"
    script_path = job_directory / DOCKING_SCRIPT_NAME

    extra_text = job_render_extra_keywords(docking.extra_keywords)
    patched = False
    if docking.remove_elements_flag:
        extra_text, patched = job_strip_elements_lines(extra_text)
    input_text = job_render_docking_input(job_name=job_name, ligand_path=ligand_path, grid_path=grid_path, docking=docking)
    input_text += extra_text

    try:
        job_directory.mkdir(parents=True, exist_ok=True)
        input_path.write_text(input_text, encoding="utf-8")
        script_path.write_text(job_render_docking_script(job_name=job_name, docking=docking), encoding="utf-8")
        job_make_executable(script_path)
        (job_directory / f"{job_name}_config.json").write_text(
            json.dumps(combination.model_dump(), indent=2) + "\n",
            encoding="utf-8",
        )
    except OSError as error:
        raise JobPreparationError(f"Failed to write docking job files in {job_directory}: {error}") from error

    logger.info("  Created input file: %s", input_path.name)
    logger.info("  Created executable script: %s", script_path.name)
    return Job.job_from_script(script_path), patched


def job_validate_input_file(path: Path, allowed_suffixes: tuple[str, ...], label: str) -> None:
    """Require an existing input file with a supported suffix.

    Args:
        path: Input file path.
        allowed_suffixes: Accepted (possibly compound) suffixes.
        label: Human-readable file kind for messages.

    Returns:
        None: Returns when the file is usable.

    Raises:
        JobPreparationError: Raised when the file is missing or its format is unsupported.
    """

    if not path.is_file():
        raise JobPreparationError(f"{label} file not found: {path}")
    if not path.name.endswith(allowed_suffixes):
        raise JobPreparationError(f"Unsupported {label.lower()} format: {path.name}")


def job_render_docking_input(job_name: str, ligand_path: Path, grid_path: Path, docking: DockingSettings) -> str:
    """Render the fixed keywords of a Glide docking `.in` file."""

    return (
        "# Glide Docking Input File\n"
        f"# Job: {job_name}\n"
        f"# Generated: {datetime.now().isoformat(timespec='seconds')}\n"
        "\n"
        f"JOBNAME              {job_name}\n"
        "DOCKING_METHOD       confgen\n"
        f"GRIDFILE             {grid_path}\n"
        f"LIGANDFILE           {ligand_path}\n"
        f"POSES_PER_LIG        {docking.poses_per_ligand}\n"
        f"POSTDOCK_NPOSE       {docking.postdock_poses}\n"
        f"PRECISION            {docking.precision}\n"
        f"POSE_OUTTYPE         {docking.pose_output_type}\n"
        "WRITE_RES_INTERACTION  true\n"
        "WRITE_CSV            true\n"
    )


def job_render_extra_keywords(extra_keywords: dict[str, str]) -> str:
    """Render configured extra keywords as aligned `.in` lines."""

    return "".join(f"{keyword:<20} {value}\n" for keyword, value in extra_keywords.items())


def job_strip_elements_lines(input_text: str) -> tuple[str, bool]:
    """Drop every line mentioning elements settings.

    Args:
        input_text: Glide input keyword lines.

    Returns:
        tuple[str, bool]: Patched text and whether any line was removed.

    Raises:
        JobPreparationError: Raised when elements settings remain after patching.
    """

    lines = input_text.splitlines(keepends=True)
    kept_lines = [line for line in lines if not _ELEMENTS_LINE_PATTERN.search(line)]
    patched_text = "".join(kept_lines)
    if _ELEMENTS_LINE_PATTERN.search(patched_text):
        raise JobPreparationError("Failed to remove elements settings from docking input")
    if len(kept_lines) != len(lines):
        logger.info("  Removed elements settings (cause license issues)")
    return patched_text, len(kept_lines) != len(lines)


def job_render_docking_script(job_name: str, docking: DockingSettings) -> str:
    """Render the bash script that runs Glide docking in the foreground.

    `-WAIT` keeps glide attached until the docking finishes, so the log's
    completion markers are written before the script exits.
    """

    return f"""#!/bin/bash
# Glide docking execution script
# Job: {job_name}

cd "$(dirname "$0")" || exit 1

if [ -z "$SCHRODINGER" ]; then
    echo "ERROR: SCHRODINGER is not set" >&2
    exit 1
fi

echo "Starting Glide docking job: {job_name}"
"$SCHRODINGER/glide" \\
    "{job_name}.in" \\
    -DRIVERHOST localhost \\
    -SUBHOST {docking.default_host} \\
    -OVERWRITE \\
    -WAIT
"""
