"""Locate, read and validate the votetracker YAML configuration.

A config file is looked up in this order, first hit wins:

1. the ``--config`` option
2. ``$VOTETRACKER_CONFIG``
3. ``votetracker.yaml`` in the working directory
4. ``$XDG_CONFIG_HOME/votetracker/config.yaml``

String values may reference environment variables as ``${NAME}``, e.g. to
keep a contest URL out of a committed file. An unset variable is an error,
never an empty string.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from votetracker.config.schema import Config
from votetracker.paths import get_default_config_path

ENV_CONFIG_VAR = "VOTETRACKER_CONFIG"
CWD_CONFIG_NAME = "votetracker.yaml"

_ENV_REF = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")


class ConfigError(Exception):
    """Base class for configuration problems.

    Attributes:
        path: Config file involved, when known
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigNotFoundError(ConfigError):
    """No config file exists at any searched location."""


class ConfigValidationError(ConfigError):
    """The YAML parsed but does not match the schema.

    Attributes:
        validation_errors: pydantic error dicts, one per failing field
    """

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        validation_errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message, path)
        self.validation_errors = validation_errors or []


class EnvironmentVariableError(ConfigError):
    """A ``${NAME}`` reference names an unset variable."""

    def __init__(self, var_name: str, path: Path | None = None) -> None:
        super().__init__(
            f"${{{var_name}}} is referenced in the config but not set in the environment",
            path,
        )
        self.var_name = var_name


def expand_env_vars(value: Any, path: Path | None = None) -> Any:
    """Substitute ``${NAME}`` references in every string of a parsed YAML tree.

    Args:
        value: Parsed YAML (mapping, list or scalar)
        path: Config file the tree came from, attached to errors

    Returns:
        A new tree with references replaced; non-string scalars pass through.

    Raises:
        EnvironmentVariableError: If a referenced variable is unset
    """
    if isinstance(value, dict):
        return {key: expand_env_vars(item, path) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item, path) for item in value]
    if not isinstance(value, str):
        return value

    def lookup(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in os.environ:
            raise EnvironmentVariableError(name, path)
        return os.environ[name]

    return _ENV_REF.sub(lookup, value)


def _search_order() -> list[Path]:
    order: list[Path] = []
    from_env = os.environ.get(ENV_CONFIG_VAR)
    if from_env:
        order.append(Path(from_env).expanduser().resolve())
    order.append(Path.cwd() / CWD_CONFIG_NAME)
    order.append(get_default_config_path())
    return order


def discover_config_path(explicit_path: str | Path | None = None) -> Path:
    """Return the config file to load.

    An explicit path must exist; it is never swapped for a discovered file.

    Raises:
        ConfigNotFoundError: If the explicit path or every searched location
            is missing
    """
    if explicit_path:
        path = Path(explicit_path).expanduser().resolve()
        if not path.exists():
            raise ConfigNotFoundError(f"Config file not found: {path}", path)
        return path

    searched = _search_order()
    for candidate in searched:
        if candidate.exists():
            return candidate

    listing = "".join(f"\n  - {p}" for p in searched)
    raise ConfigNotFoundError(f"No config file found. Searched locations:{listing}")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}", path) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}", path) from e

    # an empty file parses to None; let the schema report what is missing
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Config file must hold a YAML mapping at the top level, got {type(data).__name__}"
        raise ConfigError(msg, path)
    return data


def _describe(error: ValidationError) -> str:
    lines = [f"Config validation failed ({error.error_count()} error(s)):"]
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "(root)"
        lines.append(f"  - {field}: {item['msg']}")
    return "\n".join(lines)


def load_config(path: str | Path | None = None) -> Config:
    """Find, read, expand and validate the configuration.

    Args:
        path: Value of ``--config``; None searches the default locations

    Returns:
        Validated Config

    Raises:
        ConfigError: Or one of its subclasses, for any failure along the way
    """
    config_path = discover_config_path(path)
    raw = expand_env_vars(_read_yaml(config_path), config_path)

    try:
        return Config.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(
            _describe(e),
            path=config_path,
            validation_errors=[dict(item) for item in e.errors()],
        ) from e
