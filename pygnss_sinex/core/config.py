"""
Configuration management for PyGNSS-SINEX.

Uses Pydantic for validation and supports YAML configuration files
with environment variable expansion.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in strings."""
    if isinstance(value, str):
        return os.path.expandvars(value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(v) for v in value]
    return value


class ReaderConfig(BaseModel):
    """Options controlling a SINEX scan.

    Attributes:
        full_covariance: Also assemble the full coordinate covariance matrix
        need_covariance: If False the covariance block becomes optional
    """

    model_config = ConfigDict(extra="forbid")

    full_covariance: bool = False
    need_covariance: bool = True


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_dir: Path = Field(default=Path("logs"))
    log_to_file: bool = False
    log_to_console: bool = True
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level {value}")
        return level


class Settings(BaseSettings):
    """Main settings container."""

    model_config = SettingsConfigDict(
        env_prefix="PYGNSS_SINEX_",
        env_nested_delimiter="__",
    )

    reader: ReaderConfig = Field(default_factory=ReaderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _search_paths(config_path: Path | str | None) -> list[Path]:
    if config_path:
        return [Path(config_path)]
    return [
        Path("config/settings.local.yaml"),
        Path("config/settings.yaml"),
        Path.home() / ".pygnss_sinex" / "settings.yaml",
    ]


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Load raw configuration dictionary from YAML file.

    Args:
        config_path: Path to YAML configuration file.
                    If None, tries default locations.

    Returns:
        Configuration dictionary (empty if no file was found).
    """
    for path in _search_paths(config_path):
        if path.exists():
            with open(path) as f:
                raw_data = yaml.safe_load(f)
                if raw_data:
                    return expand_env_vars(raw_data)
            break
    return {}


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML file.

    Args:
        config_path: Path to YAML configuration file.
                    If None, tries default locations.

    Returns:
        Settings instance.
    """
    return Settings(**load_config(config_path))
