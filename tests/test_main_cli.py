"""End-to-end tests for the command-line entrypoint."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from glide_runner.config import CONFIG_FILE_ENVIRONMENT_VARIABLE
from glide_runner.main import main

_COMPLETING_SCRIPT = (
    "#!/bin/sh\n"
    'echo "Exiting Glide" > "{job_name}.log"\n'
    'echo "Total elapsed time = 3 seconds" >> "{job_name}.log"\n'
)
_FAILING_SCRIPT = '#!/bin/sh\necho "FATAL ERROR: no grid" > "{job_name}.log"\n'


@pytest.fixture
def runner_workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a config file with fast polling and an empty jobs directory."""

    jobs_directory = tmp_path / "jobs"
    jobs_directory.mkdir()
    installation_path = tmp_path / "schrodinger"
    installation_path.mkdir()
    (installation_path / "glide").write_text("#!/bin/sh\n", encoding="utf-8")
    (installation_path / "glide").chmod(0o755)
    config_file = tmp_path / "config.json"
    config_file.write_text(
        json.dumps(
            {
                "jobs": {"directory": str(jobs_directory), "timeout": 5, "check_interval": 1, "progress_interval": 60},
                "schrodinger": {"installation_path": str(installation_path)},
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv(CONFIG_FILE_ENVIRONMENT_VARIABLE, str(config_file))
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("SCHRODINGER", raising=False)
    monkeypatch.delenv("SCHRODINGER_LICENSE_FILE", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write_job(workspace: Path, job_name: str, script_text: str) -> None:
    job_directory = workspace / "jobs" / job_name
    job_directory.mkdir()
    (job_directory / "run.sh").write_text(script_text.format(job_name=job_name), encoding="utf-8")


def test_main_run_completes_jobs_and_writes_report(runner_workspace: Path) -> None:
    """Prepare, launch and poll every job, then write the JSON report.

    Args:
        runner_workspace: Temporary workspace with config and jobs directory.

    Returns:
        None: Assertions validate the end-to-end run.

    Raises:
        AssertionError: Raised when the run fails or the report is wrong.
    """

    _write_job(runner_workspace, "dock_a", _COMPLETING_SCRIPT)
    _write_job(runner_workspace, "dock_b", _COMPLETING_SCRIPT)
    report_file = runner_workspace / "report.json"

    main(["run", "--config", str(runner_workspace / "config.json"), "--report-file", str(report_file)])

    report = json.loads(report_file.read_text(encoding="utf-8"))
    assert report["summary"]["total"] == 2
    assert report["summary"]["completed"] == 2
    assert report["summary"]["failed"] == 0
    assert [outcome["job_name"] for outcome in report["outcomes"]] == ["dock_a", "dock_b"]
    assert report["outcomes"][0]["elapsed_time_line"] == "Total elapsed time = 3 seconds"
    assert report["not_started"] == []


def test_main_run_exits_non_zero_when_a_job_fails(runner_workspace: Path) -> None:
    _write_job(runner_workspace, "dock_a", _COMPLETING_SCRIPT)
    _write_job(runner_workspace, "dock_b", _FAILING_SCRIPT)
    log_file = runner_workspace / "runner.log"

    with pytest.raises(SystemExit) as exit_info:
        main(["run", "--log-file", str(log_file)])

    assert exit_info.value.code == 1
    log_text = log_file.read_text(encoding="utf-8")
    assert "Job completed successfully: dock_a" in log_text
    assert "Job failed - check dock_b.log for details" in log_text
    assert "Some jobs failed." in log_text


def test_main_prepare_exits_when_no_valid_jobs(runner_workspace: Path) -> None:
    (runner_workspace / "jobs" / "empty_job").mkdir()

    with pytest.raises(SystemExit) as exit_info:
        main(["prepare"])

    assert exit_info.value.code == 1


def test_main_prepare_makes_scripts_executable_without_running(runner_workspace: Path) -> None:
    _write_job(runner_workspace, "dock_a", _COMPLETING_SCRIPT)

    main(["prepare"])

    script_path = runner_workspace / "jobs" / "dock_a" / "run.sh"
    assert script_path.stat().st_mode & 0o111 == 0o111
    assert not (runner_workspace / "jobs" / "dock_a" / "dock_a.log").exists()


def test_main_missing_jobs_directory_is_fatal(runner_workspace: Path) -> None:
    (runner_workspace / "jobs").rmdir()

    with pytest.raises(SystemExit) as exit_info:
        main(["run"])

    assert exit_info.value.code == 1


def test_main_invalid_configuration_is_fatal(runner_workspace: Path) -> None:
    (runner_workspace / "config.json").write_text(json.dumps({"jobs": {"check_interval": 0}}), encoding="utf-8")

    with pytest.raises(SystemExit) as exit_info:
        main(["prepare"])

    assert exit_info.value.code == 1


def test_main_check_env_reports_unconfigured_license(runner_workspace: Path) -> None:
    with pytest.raises(SystemExit) as exit_info:
        main(["check-env"])

    assert exit_info.value.code == 1


def test_main_prepare_docking_requires_combinations_file(runner_workspace: Path) -> None:
    with pytest.raises(SystemExit) as exit_info:
        main(["prepare-docking"])

    assert exit_info.value.code == 2


def test_main_check_env_accepts_exported_license(runner_workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCHRODINGER_LICENSE_FILE", "27008@license-server")

    main(["check-env"])


def test_main_run_aborts_before_launch_when_glide_is_missing(runner_workspace: Path) -> None:
    """Refuse to start any job against a broken installation.

    Args:
        runner_workspace: Temporary workspace with config and jobs directory.

    Returns:
        None: Assertions validate the structural abort.

    Raises:
        AssertionError: Raised when a job runs or the exit status is wrong.
    """

    _write_job(runner_workspace, "dock_a", _COMPLETING_SCRIPT)
    (runner_workspace / "schrodinger" / "glide").unlink()
    log_file = runner_workspace / "runner.log"

    with pytest.raises(SystemExit) as exit_info:
        main(["run", "--log-file", str(log_file)])

    assert exit_info.value.code == 1
    assert not (runner_workspace / "jobs" / "dock_a" / "dock_a.log").exists()
    assert "glide executable not found in" in log_file.read_text(encoding="utf-8")


def test_main_run_writes_partial_report_when_a_job_directory_disappears(runner_workspace: Path) -> None:
    _write_job(
        runner_workspace,
        "dock_a",
        '#!/bin/sh\nrm -rf ../dock_b\necho "Exiting Glide" > dock_a.log\necho "Total elapsed time = 1 seconds" >> dock_a.log\n',
    )
    _write_job(runner_workspace, "dock_b", _COMPLETING_SCRIPT)
    _write_job(runner_workspace, "dock_c", _COMPLETING_SCRIPT)
    report_file = runner_workspace / "report.json"

    with pytest.raises(SystemExit) as exit_info:
        main(["run", "--report-file", str(report_file)])

    assert exit_info.value.code == 1
    report = json.loads(report_file.read_text(encoding="utf-8"))
    assert report["summary"]["total"] == 1
    assert report["summary"]["completed"] == 1
    assert report["not_started"] == ["dock_b", "dock_c"]
    assert not (runner_workspace / "jobs" / "dock_c" / "dock_c.log").exists()
