"""Configuration module for votetracker.

This module provides configuration loading, validation, and schema definitions.

Usage:
    from votetracker.config import load_config, Config

    config = load_config()  # Auto-discovers config file
    config = load_config("/path/to/config.yaml")  # Explicit path
"""

from votetracker.config.loader import (
    ConfigError,
    ConfigNotFoundError,
    ConfigValidationError,
    EnvironmentVariableError,
    discover_config_path,
    load_config,
)
from votetracker.config.schema import (
    BaselinePolicy,
    Config,
    ContestConfig,
    MissingParticipantPolicy,
    StateConfig,
    WindowConfig,
)

__all__ = [
    "BaselinePolicy",
    "Config",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "ContestConfig",
    "EnvironmentVariableError",
    "MissingParticipantPolicy",
    "StateConfig",
    "WindowConfig",
    "discover_config_path",
    "load_config",
]
