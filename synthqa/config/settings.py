"""Configuration settings and loading."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from synthqa.core.models import MonitorConfig, RunOptions, ScreenshotMode
from synthqa.errors import ConfigError, ErrorContext
from synthqa.observability.logging import configure_logging

DEFAULT_CONFIG_FILE = "synthqa.yaml"


class SynthQAConfig(BaseSettings):
    """Configuration for SynthQA runs."""

    model_config = SettingsConfigDict(
        env_prefix="SYNTHQA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str | None = None
    params: dict[str, Any] = Field(default_factory=dict)
    match: str | None = None
    tags: list[str] | None = None
    dry_run: bool = False
    pause_on_error: bool = False
    screenshots: ScreenshotMode = ScreenshotMode.ON
    metrics: bool = False
    reporter: str = "default"
    driver_options: dict[str, Any] = Field(default_factory=dict)
    monitor: MonitorConfig | None = None
    cache_dir: str | None = None
    log_level: str = "WARNING"
    log_json: bool = False

    @field_validator("reporter", mode="before")
    @classmethod
    def validate_reporter(cls, v: str) -> str:
        valid = {"default", "json"}
        if v not in valid:
            raise ValueError(f"Invalid reporter: {v}. Valid: {sorted(valid)}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = str(v).upper()
        if level not in valid:
            raise ValueError(f"Invalid log level: {v}. Valid: {sorted(valid)}")
        return level

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [t.strip() for t in v.split(",") if t.strip()]
        return v

    def setup_logging(self) -> None:
        """Install the ``synthqa`` log handler described by this config."""
        configure_logging(level=self.log_level, json_output=self.log_json)

    def to_run_options(self, **overrides: Any) -> RunOptions:
        """Build the immutable options of one run.

        Keyword arguments override configured values and may also set fields
        that only exist at run time, such as ``output``.

        Raises:
            ConfigError: If the resulting options are invalid.
        """
        values: dict[str, Any] = {
            "environment": self.environment,
            "params": dict(self.params),
            "match": self.match,
            "tags": list(self.tags) if self.tags is not None else None,
            "dry_run": self.dry_run,
            "pause_on_error": self.pause_on_error,
            "screenshots": self.screenshots,
            "metrics": self.metrics,
            "reporter": self.reporter,
            "driver_options": dict(self.driver_options),
        }
        values.update(overrides)
        try:
            return RunOptions(**values)
        except ValidationError as e:
            raise ConfigError(
                message=f"Invalid run options: {e.error_count()} error(s)",
                cause=e,
                errors=_format_errors(e),
            ) from e


def load_config(config_path: str | Path | None = None) -> SynthQAConfig:
    """Load configuration from file and environment.

    Priority: env vars > config file > defaults

    Raises:
        ConfigError: If the file cannot be parsed or a value is invalid.
    """
    config_data: dict[str, Any] = {}

    if config_path is None and Path(DEFAULT_CONFIG_FILE).exists():
        config_path = DEFAULT_CONFIG_FILE

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigError(
                message=f"Config file not found: {config_path}",
                context=ErrorContext(extra={"path": str(config_path)}),
            )
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(message=f"Invalid YAML in {config_path}: {e}", cause=e) from e
        if not isinstance(config_data, dict):
            raise ConfigError(message=f"Config file {config_path} must contain a mapping")

    config_data.update(_get_env_overrides())

    try:
        return SynthQAConfig(**config_data)
    except ValidationError as e:
        raise ConfigError(
            message=f"Invalid configuration: {e.error_count()} error(s)",
            cause=e,
            errors=_format_errors(e),
        ) from e


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    def to_bool(x: str) -> bool:
        return x.lower() in ("true", "1", "yes")

    env_mappings = {
        "SYNTHQA_ENVIRONMENT": "environment",
        "SYNTHQA_MATCH": "match",
        "SYNTHQA_TAGS": ("tags", json.loads),
        "SYNTHQA_REPORTER": "reporter",
        "SYNTHQA_SCREENSHOTS": "screenshots",
        "SYNTHQA_LOG_LEVEL": "log_level",
        "SYNTHQA_CACHE_DIR": "cache_dir",
        "SYNTHQA_PARAMS": ("params", json.loads),
        "SYNTHQA_DRY_RUN": ("dry_run", to_bool),
        "SYNTHQA_METRICS": ("metrics", to_bool),
        "SYNTHQA_PAUSE_ON_ERROR": ("pause_on_error", to_bool),
        "SYNTHQA_LOG_JSON": ("log_json", to_bool),
    }

    for env_key, config_key in env_mappings.items():
        value = os.environ.get(env_key)
        if value is not None:
            if isinstance(config_key, tuple):
                key, converter = config_key
                try:
                    overrides[key] = converter(value)
                except ValueError as e:
                    raise ConfigError(message=f"Invalid value for {env_key}: {value!r}", cause=e) from e
            else:
                overrides[config_key] = value

    return overrides


def _format_errors(error: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
        for err in error.errors()
    ]
