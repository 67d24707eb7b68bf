"""User settings for imgst.

Settings are read from an optional TOML file, by default
~/.config/imgst/config.toml. Every field has a default, so a missing
default file simply yields the defaults. Command-line options take
precedence over the file.

Example config.toml::

    num_threads = 8
    extensions = ["jpg", "jpeg", "jpe"]
    respect_ignore_files = true
    jpeg_quality = "keep"
"""

import tomllib
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from imgst.core.paths import get_config_path
from imgst.walker.classifier import DEFAULT_EXTENSIONS, normalize_extensions


class ImgstSettings(BaseModel):
    """Settings for a cleaning run.

    Attributes:
        num_threads: Worker threads for the walk (0 = one per CPU).
        extensions: File extensions selected for cleaning.
        respect_ignore_files: Honour .ignore/.gitignore files during the walk.
        jpeg_quality: "keep" for a lossless rewrite, or 1-95 to re-encode.
    """

    model_config = ConfigDict(extra="forbid")

    num_threads: Annotated[
        int,
        Field(ge=0, description="Worker threads (0 = automatic)"),
    ] = 0
    extensions: Annotated[
        list[str],
        Field(min_length=1, description="Extensions selected for cleaning"),
    ] = sorted(DEFAULT_EXTENSIONS)
    respect_ignore_files: Annotated[
        bool,
        Field(description="Honour .ignore and .gitignore files"),
    ] = True
    jpeg_quality: Annotated[
        Literal["keep"] | Annotated[int, Field(ge=1, le=95)],
        Field(description="'keep' or a JPEG quality between 1 and 95"),
    ] = "keep"

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        """Normalize extensions and reject lists that end up empty."""
        normalized = normalize_extensions(v)
        if not normalized:
            msg = "extensions must contain at least one non-empty extension"
            raise ValueError(msg)
        return sorted(normalized)

    @property
    def extension_set(self) -> frozenset[str]:
        """Extensions as the set used by the classifier."""
        return frozenset(self.extensions)


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsNotFoundError(SettingsError):
    """Raised when an explicitly requested settings file does not exist."""


class SettingsParseError(SettingsError):
    """Raised when the settings file is not valid TOML."""


def load_settings(path: Path | None = None) -> ImgstSettings:
    """Load settings from a TOML file.

    Args:
        path: Settings file to read. If None, the default location is
            used and a missing file yields default settings.

    Returns:
        Validated ImgstSettings.

    Raises:
        SettingsNotFoundError: If an explicit path does not exist.
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the file cannot be read or does not match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        if path is not None:
            raise SettingsNotFoundError(f"Settings file not found: {config_path}")
        return ImgstSettings()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings file {config_path}: {e}") from e

    try:
        return ImgstSettings.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise SettingsError(f"Invalid settings in {config_path}: {e}") from e
