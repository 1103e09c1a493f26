"""
Configuration loader for YAML files.

Loads and validates configuration from YAML files into Pydantic models.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import ClientConfig


DEFAULT_CONFIG_PATH = Path("nominatim.yaml")

# ${VAR} and ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(Exception):
    """Configuration loading or validation error."""

    def __init__(self, message: str, path: Path | None = None, details: str | None = None):
        self.path = path
        self.details = details
        super().__init__(message)


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file and return its contents as a dictionary.

    Raises:
        ConfigError: If file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}", path=path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML in {path}",
            path=path,
            details=str(e),
        ) from e
    except OSError as e:
        raise ConfigError(
            f"Cannot read {path}",
            path=path,
            details=str(e),
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Expected a mapping at the top level of {path}",
            path=path,
            details=f"got {type(data).__name__}",
        )
    return data


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in string values.

    Supports ${VAR} and ${VAR:-default} syntax.
    """
    if isinstance(data, str):
        def replacer(match: re.Match[str]) -> str:
            return os.environ.get(match.group(1), match.group(2) or "")

        return _ENV_VAR_PATTERN.sub(replacer, data)
    if isinstance(data, dict):
        return {k: _expand_env_vars(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    return data


def load_client_config(
    path: Path | str | None = None,
    expand_env: bool = True,
) -> ClientConfig:
    """Load client configuration from a YAML file.

    Args:
        path: Path to the YAML file (default: ./nominatim.yaml)
        expand_env: Whether to expand environment variables

    Returns:
        Validated ClientConfig instance. When no path is given and the
        default file does not exist, the built-in defaults are returned.

    Raises:
        ConfigError: If configuration is missing or invalid
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return ClientConfig()
        path = DEFAULT_CONFIG_PATH
    else:
        path = Path(path)

    data = _load_yaml_file(path)

    if expand_env:
        data = _expand_env_vars(data)

    try:
        return ClientConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid client configuration in {path}",
            path=path,
            details=str(e),
        ) from e
