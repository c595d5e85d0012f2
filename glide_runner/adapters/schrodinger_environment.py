"""Schrodinger process environment derivation and installation checks."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from glide_runner.config import SchrodingerSettings


def environment_license_file_path(settings: SchrodingerSettings) -> Path | None:
    """Return the configured license file path.

    Args:
        settings: Schrodinger settings section.

    Returns:
        Path | None: `license_path/license_file`, or None when not configured.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    license_path = settings.license_path.strip()
    license_file = settings.license_file.strip()
    if not license_path or not license_file:
        return None
    return Path(license_path) / license_file


def environment_resolve_installation_path(
    settings: SchrodingerSettings,
    base_environment: Mapping[str, str] | None = None,
) -> str:
    """Return the installation jobs will run against.

    An already exported `SCHRODINGER` wins over the configured path, matching
    a shell where the setup script was sourced before the run.
    """

    environment = os.environ if base_environment is None else base_environment
    return environment.get("SCHRODINGER") or settings.installation_path.strip()


def environment_build(
    settings: SchrodingerSettings,
    base_environment: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Build the child-process environment for Schrodinger jobs.

    Args:
        settings: Schrodinger settings section.
        base_environment: Environment to extend, defaults to `os.environ`.

    Returns:
        dict[str, str]: Environment with `SCHRODINGER`, `PATH` and, when
        configured, `SCHRODINGER_LICENSE_FILE`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    environment = dict(os.environ if base_environment is None else base_environment)
    installation_path = environment_resolve_installation_path(settings, environment)
    environment["SCHRODINGER"] = installation_path

    license_file_path = environment_license_file_path(settings)
    if license_file_path is not None and not environment.get("SCHRODINGER_LICENSE_FILE"):
        environment["SCHRODINGER_LICENSE_FILE"] = str(license_file_path)

    path_entries = [entry for entry in environment.get("PATH", "").split(os.pathsep) if entry]
    if installation_path not in path_entries:
        path_entries.insert(0, installation_path)
    environment["PATH"] = os.pathsep.join(path_entries)
    return environment


def environment_validate_installation(
    settings: SchrodingerSettings,
    base_environment: Mapping[str, str] | None = None,
) -> tuple[str, ...]:
    """Return problems with the installation that `environment_build` resolves.

    Args:
        settings: Schrodinger settings section.
        base_environment: Environment jobs inherit, defaults to `os.environ`.

    Returns:
        tuple[str, ...]: Installation problems, empty when `glide` is executable.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    installation_path = Path(environment_resolve_installation_path(settings, base_environment))
    if not installation_path.is_dir():
        return (f"Schrodinger installation not found at {installation_path}",)
    if not os.access(installation_path / "glide", os.X_OK):
        return (f"glide executable not found in {installation_path}",)
    return ()


def environment_validate(
    settings: SchrodingerSettings,
    base_environment: Mapping[str, str] | None = None,
) -> tuple[str, ...]:
    """Return human-readable problems with the Schrodinger installation and license.

    An exported `SCHRODINGER_LICENSE_FILE` (file path or `port@host`) is
    accepted as is, since `environment_build` passes it through unchanged.

    Args:
        settings: Schrodinger settings section.
        base_environment: Environment jobs inherit, defaults to `os.environ`.

    Returns:
        tuple[str, ...]: Problems found, empty when the installation looks usable.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    environment = os.environ if base_environment is None else base_environment
    issues = list(environment_validate_installation(settings, environment))
    if environment.get("SCHRODINGER_LICENSE_FILE"):
        return tuple(issues)

    license_directory = settings.license_path.strip()
    license_file_path = environment_license_file_path(settings)
    if not license_directory or license_file_path is None:
        issues.append("Schrodinger license is not configured (schrodinger.license_path, schrodinger.license_file)")
    elif not Path(license_directory).is_dir():
        issues.append(f"Schrodinger license directory not found at {license_directory}")
    elif not license_file_path.is_file():
        issues.append(f"License file not found at {license_file_path}")

    return tuple(issues)
