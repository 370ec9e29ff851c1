"""Config Loader - Loads client settings from YAML or the environment.

YAML example:

    api_key: ${APISTAX_API_KEY}
    base_url: https://api.apistax.io
    timeout: 10

${ENV_VAR} patterns in any string value are replaced with the variable's
value; an unset variable is an error.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

ENV_API_KEY = "APISTAX_API_KEY"
ENV_BASE_URL = "APISTAX_BASE_URL"
ENV_TIMEOUT = "APISTAX_TIMEOUT"

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


class ConfigError(Exception):
    """Raised when configuration loading fails."""


class ClientConfig(BaseModel):
    """Settings needed to construct an APIstaxClient."""

    model_config = ConfigDict(extra="forbid")

    api_key: str = Field(min_length=1, description="Bearer token for the API")
    base_url: str = Field(default="https://api.apistax.io", description="Service address")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")


def load_client_config(config_path: Path) -> ClientConfig:
    """Load client configuration from YAML with ${ENV_VAR} substitution."""
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError("Config file must be a YAML mapping")

    raw_config = _substitute_env_vars(raw_config)

    try:
        return ClientConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid config structure: {e}") from e


def config_from_env(environ: Mapping[str, str] | None = None) -> ClientConfig:
    """Build configuration from APISTAX_* environment variables.

    APISTAX_API_KEY is required; APISTAX_BASE_URL and APISTAX_TIMEOUT are optional.
    """
    env = os.environ if environ is None else environ

    api_key = env.get(ENV_API_KEY)
    if not api_key:
        raise ConfigError(f"Environment variable '{ENV_API_KEY}' is not set")

    raw_config: dict[str, Any] = {"api_key": api_key}
    if env.get(ENV_BASE_URL):
        raw_config["base_url"] = env[ENV_BASE_URL]
    if env.get(ENV_TIMEOUT):
        raw_config["timeout"] = env[ENV_TIMEOUT]

    try:
        return ClientConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration from environment: {e}") from e


def _substitute_env_vars(data: Any) -> Any:
    """Recursively substitute ${ENV_VAR} patterns in strings within data."""
    if isinstance(data, str):
        return _substitute_string(data)
    elif isinstance(data, dict):
        return {k: _substitute_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_substitute_env_vars(item) for item in data]
    return data


def _substitute_string(s: str) -> str:
    """Substitute ${ENV_VAR} patterns. Raises ConfigError if env var is not set."""

    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(f"Environment variable '{var_name}' is not set")
        return value

    return _ENV_VAR_PATTERN.sub(replacer, s)
