"""Typed runner settings loaded from the JSON config file, environment and dotenv."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

CONFIG_FILE_ENVIRONMENT_VARIABLE: Final[str] = "GLIDE_RUNNER_CONFIG_FILE"
DEFAULT_CONFIG_FILE_NAME: Final[str] = "config.json"


class SettingsLoadError(RuntimeError):
    """Raised when runner settings cannot be loaded or validated."""


class JobsSettings(BaseModel):
    """Job directory and completion polling settings.

    Attributes:
        directory: Jobs directory, relative to the home directory unless absolute.
        timeout: Maximum seconds to wait for one job to finish.
        check_interval: Seconds between log checks.
        progress_interval: Seconds between "still waiting" progress notices.
    """

    directory: str = Field(default="jobs", min_length=1)
    timeout: int = Field(default=3600, ge=0)
    check_interval: int = Field(default=30, ge=1)
    progress_interval: int = Field(default=300, ge=1)


class MarkerSettings(BaseModel):
    """Log marker phrases consumed by the completion poller.

    Attributes:
        completion: Phrases that must ALL be present for completion.
        failure: Phrases of which ANY signals a fatal failure.
        elapsed_time: Phrase identifying the tool's elapsed-time line.
    """

    completion: tuple[str, ...] = ("Exiting Glide", "Total elapsed time")
    failure: tuple[str, ...] = ("FATAL ERROR", "Failed to check out a license")
    elapsed_time: str = "Total elapsed time"

    @field_validator("completion", "failure")
    @classmethod
    def _validate_marker_phrases(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("at least one marker phrase is required")
        if any(not phrase.strip() for phrase in value):
            raise ValueError("marker phrases must not be blank")
        return value


class SchrodingerSettings(BaseModel):
    """Schrodinger installation and license locations.

    Attributes:
        installation_path: Schrodinger installation root (`$SCHRODINGER`).
        license_path: Directory holding license files.
        license_file: License file name inside `license_path`.
    """

    installation_path: str = "/opt/schrodinger2025-1"
    license_path: str = ""
    license_file: str = ""


class DirectorySettings(BaseModel):
    """Single-directory settings section (`ligands`, `grids`)."""

    directory: str = Field(min_length=1)


class DockingSettings(BaseModel):
    """Glide docking input defaults.

    Attributes:
        precision: Docking precision keyword (`HTVS`, `SP`, `XP`).
        poses_per_ligand: `POSES_PER_LIG` value.
        postdock_poses: `POSTDOCK_NPOSE` value.
        pose_output_type: `POSE_OUTTYPE` value.
        remove_elements_flag: Whether license-problematic elements settings are stripped.
        default_host: Subjob host passed as `-SUBHOST`.
        extra_keywords: Additional Glide input keywords appended to every docking input.
    """

    precision: str = "SP"
    poses_per_ligand: int = Field(default=1, ge=1)
    postdock_poses: int = Field(default=1, ge=1)
    pose_output_type: str = "ligandlib_sd"
    remove_elements_flag: bool = True
    default_host: str = "batch-small"
    extra_keywords: dict[str, str] = Field(default_factory=dict)


class RunnerSettings(BaseSettings):
    """Runner settings mirroring the sections of `~/config.json`.

    Source precedence: init kwargs, `GLIDE_RUNNER_*` environment variables
    (nested with `__`, e.g. `GLIDE_RUNNER_JOBS__TIMEOUT`), `.env`, then the
    JSON config file.
    """

    model_config = SettingsConfigDict(
        env_prefix="GLIDE_RUNNER_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    jobs: JobsSettings = Field(default_factory=JobsSettings)
    markers: MarkerSettings = Field(default_factory=MarkerSettings)
    schrodinger: SchrodingerSettings = Field(default_factory=SchrodingerSettings)
    ligands: DirectorySettings = Field(default_factory=lambda: DirectorySettings(directory="ligands"))
    grids: DirectorySettings = Field(default_factory=lambda: DirectorySettings(directory="grids"))
    docking: DockingSettings = Field(default_factory=DockingSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls, json_file=config_resolve_file_path()),
            file_secret_settings,
        )

    def settings_jobs_directory(self) -> Path:
        """Return the absolute jobs directory."""

        return config_resolve_home_relative(self.jobs.directory)

    def settings_ligands_directory(self) -> Path:
        """Return the absolute ligands directory."""

        return config_resolve_home_relative(self.ligands.directory)

    def settings_grids_directory(self) -> Path:
        """Return the absolute grids directory."""

        return config_resolve_home_relative(self.grids.directory)


def config_resolve_file_path() -> Path:
    """Resolve the JSON config file path.

    Returns:
        Path: `$GLIDE_RUNNER_CONFIG_FILE` when set, otherwise `~/config.json`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    configured_path = os.environ.get(CONFIG_FILE_ENVIRONMENT_VARIABLE, "").strip()
    if configured_path:
        return Path(configured_path).expanduser()
    return Path.home() / DEFAULT_CONFIG_FILE_NAME


def config_resolve_home_relative(directory: str) -> Path:
    """Resolve a configured directory against the home directory.

    Args:
        directory: Absolute path, `~` path, or path relative to home.

    Returns:
        Path: Absolute directory path.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    candidate = Path(directory).expanduser()
    if candidate.is_absolute():
        return candidate
    return Path.home() / candidate


def config_load_settings() -> RunnerSettings:
    """Load and validate runner settings.

    A missing JSON config file is not an error; defaults apply.

    Returns:
        RunnerSettings: Validated settings object.

    Raises:
        SettingsLoadError: Raised when settings are present but invalid.
    """

    try:
        return RunnerSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Runner configuration validation failed. Update {config_resolve_file_path()} "
            f"or GLIDE_RUNNER_* environment variables. Details: {error}"
        ) from error
