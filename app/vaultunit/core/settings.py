"""Transfer settings and their TOML file.

Settings hold the hidden marker prefix, the vault format version
written on export, and the fallback overwrite policy for imports.

Settings are stored in ~/.config/vaultunit/config.toml
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from vaultunit.core.paths import get_settings_path

# Prefix shared by the hidden marker files in every vault directory
DEFAULT_MARKER_PREFIX = ".f8b52b7481393a3e6ade051ecfb549fa"

# Vault format written by this version of the tool
CURRENT_FORMAT_VERSION = 1


class UnitSettings(BaseModel):
    """Configuration for export/import runs.

    Attributes:
        marker_prefix: Name prefix of the link index and version files.
        format_version: Vault format version written on export.
        overwrite: Fallback overwrite policy when the context gives none.
    """

    model_config = ConfigDict(extra="forbid")

    marker_prefix: Annotated[
        str,
        Field(min_length=1, description="Hidden marker file prefix"),
    ] = DEFAULT_MARKER_PREFIX
    format_version: Annotated[
        int,
        Field(ge=1, description="Current vault format version"),
    ] = CURRENT_FORMAT_VERSION
    overwrite: Annotated[
        bool,
        Field(description="Default overwrite policy for imports"),
    ] = False


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> UnitSettings:
    """Load settings from a TOML file.

    A missing file yields the defaults.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated UnitSettings object.

    Raises:
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the file cannot be read or the content is invalid.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        return UnitSettings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return UnitSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings content: {e}") from e


def save_settings(settings: UnitSettings, path: Path | None = None) -> Path:
    """Save settings to a TOML file atomically.

    Args:
        settings: The settings to save.
        path: Path to save to. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()

    tmp_path: Path | None = None
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(settings.model_dump(), f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path


def require_settings(path: Path | None = None) -> UnitSettings:
    """Load settings or exit with a helpful error message.

    Args:
        path: Optional custom settings path.

    Raises:
        typer.Exit: If the settings file is invalid.
    """
    import typer

    from vaultunit.utils.formatting import print_error, print_info

    settings_path = path or get_settings_path()
    try:
        return load_settings(settings_path)
    except SettingsError as e:
        print_error(f"Failed to load settings: {e}")
        print_info(f"Fix or remove {settings_path}, or run 'vaultunit config init --force'.")
        raise typer.Exit(code=1) from e
