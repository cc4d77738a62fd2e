from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_MANIFEST_NAME, ENV_PREFIX
from .errors import ConfigError


class CopyModulesConfig(BaseSettings):
    """Plugin options, from keyword arguments or COPY_MODULES_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        frozen=True,
        extra="ignore",
    )

    # Required; resolved against the process cwd when the config is built.
    destination: Path = Field(description="Root of the mirrored output tree")

    include_manifests: bool = Field(
        default=False,
        description="Also copy the nearest package manifest of every dependency file",
    )
    manifest_name: str = Field(
        default=DEFAULT_MANIFEST_NAME,
        description="File name probed for during manifest discovery",
    )

    @field_validator("destination", mode="before")
    @classmethod
    def _reject_blank_destination(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("destination is required")
        if isinstance(value, str) and not value.strip():
            raise ValueError("destination must not be empty")
        return value

    @field_validator("destination", mode="after")
    @classmethod
    def _resolve_destination(cls, value: Path) -> Path:
        return Path(os.path.abspath(Path.cwd() / value))

    @field_validator("manifest_name", mode="after")
    @classmethod
    def _validate_manifest_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed or trimmed in {".", ".."} or Path(trimmed).name != trimmed:
            raise ValueError(f"manifest_name must be a bare file name, got {value!r}")
        return trimmed


def load_config(**overrides: Any) -> CopyModulesConfig:
    """Build a config, turning validation failures into ConfigError."""
    options = {key: value for key, value in overrides.items() if value is not None}
    try:
        return CopyModulesConfig(**options)
    except ValidationError as exc:
        raise ConfigError(f"Invalid copy-modules configuration: {exc}") from exc
