"""Regression tests for docking job generation from combination files."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from glide_runner.config import DirectorySettings, DockingSettings, RunnerSettings
from glide_runner.jobs import JobPreparationError, job_load_docking_combinations, job_prepare_docking_jobs
from glide_runner.jobs.docking_preparation import job_render_docking_script, job_strip_elements_lines


@pytest.fixture
def docking_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> RunnerSettings:
    """Build settings rooted in a temporary workspace with one ligand and one grid."""

    monkeypatch.setenv("GLIDE_RUNNER_CONFIG_FILE", str(tmp_path / "missing_config.json"))
    monkeypatch.chdir(tmp_path)
    (tmp_path / "ligands").mkdir()
    (tmp_path / "grids").mkdir()
    (tmp_path / "ligands" / "aspirin.sdf").write_text("aspirin\n$$$$\n", encoding="utf-8")
    (tmp_path / "ligands" / "notes.txt").write_text("not a ligand\n", encoding="utf-8")
    (tmp_path / "grids" / "cox2.zip").write_bytes(b"PK")
    return RunnerSettings(
        jobs={"directory": str(tmp_path / "jobs")},
        ligands={"directory": str(tmp_path / "ligands")},
        grids={"directory": str(tmp_path / "grids")},
        docking={"precision": "XP", "default_host": "gpu-node"},
    )


def _write_combinations(tmp_path: Path, combinations: list[dict[str, str]]) -> Path:
    combinations_file = tmp_path / "combinations.json"
    combinations_file.write_text(json.dumps({"docking_combinations": combinations}), encoding="utf-8")
    return combinations_file


def test_jobs_docking_creates_job_files(tmp_path: Path, docking_settings: RunnerSettings) -> None:
    """Write input, script and saved config for a valid combination.

    Args:
        tmp_path: Pytest temporary directory fixture.
        docking_settings: Settings with temporary directories.

    Returns:
        None: Assertions validate generated files.

    Raises:
        AssertionError: Raised when files are missing or malformed.
    """

    combinations_file = _write_combinations(
        tmp_path, [{"ligand": "aspirin.sdf", "grid": "cox2.zip", "job_name": "aspirin_cox2"}]
    )

    report = job_prepare_docking_jobs(combinations_file, docking_settings)

    assert [job.name for job in report.valid_jobs] == ["aspirin_cox2"]
    job_directory = tmp_path / "jobs" / "aspirin_cox2"
    input_text = (job_directory / "aspirin_cox2.in").read_text(encoding="utf-8")
    assert f"GRIDFILE             {tmp_path / 'grids' / 'cox2.zip'}" in input_text
    assert f"LIGANDFILE           {tmp_path / 'ligands' / 'aspirin.sdf'}" in input_text
    assert "PRECISION            XP" in input_text
    script_path = job_directory / "run_docking.sh"
    assert os.stat(script_path).st_mode & 0o111 == 0o111
    assert "-SUBHOST gpu-node" in script_path.read_text(encoding="utf-8")
    saved_config = json.loads((job_directory / "aspirin_cox2_config.json").read_text(encoding="utf-8"))
    assert saved_config == {"ligand": "aspirin.sdf", "grid": "cox2.zip", "job_name": "aspirin_cox2"}
    assert report.valid_jobs[0].log_path == job_directory / "aspirin_cox2.log"


def test_jobs_docking_reports_invalid_combinations(tmp_path: Path, docking_settings: RunnerSettings) -> None:
    combinations_file = _write_combinations(
        tmp_path,
        [
            {"ligand": "notes.txt", "grid": "cox2.zip", "job_name": "bad_format"},
            {"ligand": "aspirin.sdf", "grid": "missing.zip", "job_name": "missing_grid"},
            {"ligand": "aspirin.sdf", "grid": "cox2.zip", "job_name": "good"},
        ],
    )

    report = job_prepare_docking_jobs(combinations_file, docking_settings)

    assert [job.name for job in report.valid_jobs] == ["good"]
    reasons = {invalid.name: invalid.reason for invalid in report.invalid_directories}
    assert reasons["bad_format"] == "Unsupported ligand format: notes.txt"
    assert reasons["missing_grid"].startswith("Grid file not found:")
    assert not (tmp_path / "jobs" / "bad_format").exists()


def test_jobs_docking_requires_ligands_directory(tmp_path: Path, docking_settings: RunnerSettings) -> None:
    combinations_file = _write_combinations(tmp_path, [])
    settings = docking_settings.model_copy(update={"ligands": DirectorySettings(directory=str(tmp_path / "nope"))})

    with pytest.raises(JobPreparationError, match="Ligands directory not found"):
        job_prepare_docking_jobs(combinations_file, settings)


def test_jobs_docking_rejects_invalid_combination_documents(tmp_path: Path) -> None:
    not_json = tmp_path / "broken.json"
    not_json.write_text("{not json", encoding="utf-8")
    unsafe_name = _write_combinations(tmp_path, [{"ligand": "a.sdf", "grid": "g.zip", "job_name": "../escape"}])

    with pytest.raises(JobPreparationError, match="Invalid docking combination file"):
        job_load_docking_combinations(not_json)
    with pytest.raises(JobPreparationError, match="Invalid docking combination file"):
        job_load_docking_combinations(unsafe_name)
    with pytest.raises(JobPreparationError, match="JSON input file not found"):
        job_load_docking_combinations(tmp_path / "absent.json")


def test_jobs_docking_strips_elements_lines() -> None:
    patched_text, patched = job_strip_elements_lines("JOBNAME x\nUSE_ELEMENTS true\nelements_file e.txt\nPRECISION SP\n")

    assert patched
    assert patched_text == "JOBNAME x\nPRECISION SP\n"
    assert job_strip_elements_lines("JOBNAME x\n") == ("JOBNAME x\n", False)


def test_jobs_docking_script_waits_for_glide() -> None:
    script_text = job_render_docking_script("aspirin_cox2", DockingSettings())

    assert script_text.startswith("#!/bin/bash\n")
    assert '"aspirin_cox2.in"' in script_text
    assert "-WAIT" in script_text
    assert "-SUBHOST batch-small" in script_text


def test_jobs_docking_strips_elements_from_extra_keywords_only(tmp_path: Path, docking_settings: RunnerSettings) -> None:
    """Remove elements keywords from configured extras and keep the fixed input intact.

    Args:
        tmp_path: Pytest temporary directory fixture.
        docking_settings: Settings with temporary directories.

    Returns:
        None: Assertions validate patched docking input.

    Raises:
        AssertionError: Raised when elements keywords survive or other lines are lost.
    """

    (tmp_path / "ligands" / "elements_set.sdf").write_text("x\n$$$$\n", encoding="utf-8")
    settings = docking_settings.model_copy(
        update={
            "docking": DockingSettings(extra_keywords={"USE_ELEMENTS": "true", "MAXKEEP": "5000"}),
        }
    )
    combinations_file = _write_combinations(
        tmp_path, [{"ligand": "elements_set.sdf", "grid": "cox2.zip", "job_name": "elements_cox2"}]
    )

    report = job_prepare_docking_jobs(combinations_file, settings)

    assert report.patched_jobs == ("elements_cox2",)
    input_text = (tmp_path / "jobs" / "elements_cox2" / "elements_cox2.in").read_text(encoding="utf-8")
    assert "USE_ELEMENTS" not in input_text
    assert "MAXKEEP              5000\n" in input_text
    assert f"LIGANDFILE           {tmp_path / 'ligands' / 'elements_set.sdf'}" in input_text


def test_jobs_docking_keeps_extra_keywords_when_patching_disabled(tmp_path: Path, docking_settings: RunnerSettings) -> None:
    settings = docking_settings.model_copy(
        update={"docking": DockingSettings(extra_keywords={"USE_ELEMENTS": "true"}, remove_elements_flag=False)}
    )
    combinations_file = _write_combinations(tmp_path, [{"ligand": "aspirin.sdf", "grid": "cox2.zip", "job_name": "keep"}])

    report = job_prepare_docking_jobs(combinations_file, settings)

    assert report.patched_jobs == ()
    assert "USE_ELEMENTS         true\n" in (tmp_path / "jobs" / "keep" / "keep.in").read_text(encoding="utf-8")
