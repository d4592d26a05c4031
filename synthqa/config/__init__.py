"""Configuration management for SynthQA."""

from synthqa.config.settings import DEFAULT_CONFIG_FILE, SynthQAConfig, load_config
from synthqa.errors import ConfigError

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "ConfigError",
    "SynthQAConfig",
    "load_config",
]
