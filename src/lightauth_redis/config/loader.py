"""Configuration loading from TOML files and environment variables."""

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import SecretStr, ValidationError

from lightauth_redis.config.models import ConfigError, LightauthConfig

HOME_ENV_VAR = "LIGHTAUTH_HOME"
URL_ENV_VAR = "LIGHTAUTH_REDIS_URL"
PASSWORD_ENV_VAR = "LIGHTAUTH_REDIS_PASSWORD"


def get_lightauth_home() -> Path:
    """Base directory for user config (``LIGHTAUTH_HOME`` or ~/.lightauth)."""
    if home := os.environ.get(HOME_ENV_VAR):
        return Path(home).expanduser()
    return Path.home() / ".lightauth"


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("lightauth.toml"),  # Current directory
        get_lightauth_home() / "config.toml",
        Path("/etc/lightauth/config.toml"),  # System-wide
    ]


def _resolve_env(config: dict[str, Any]) -> dict[str, Any]:
    """Apply environment overrides for the Redis URL and password."""
    section = config.setdefault("redis", {})
    if not isinstance(section, dict):
        raise ConfigError("[redis] must be a table")

    if url := os.environ.get(URL_ENV_VAR):
        section["url"] = url
    if section.get("password") is None:
        if password := os.environ.get(PASSWORD_ENV_VAR):
            section["password"] = SecretStr(password)
    return config


def load_config(path: Path | None = None) -> LightauthConfig:
    """Load configuration from a TOML file.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Validated LightauthConfig instance.

    Raises:
        FileNotFoundError: If no config file is found.
        ConfigError: If the config file is invalid.
    """
    config_path: Path | None = None

    default_paths = _get_default_config_paths()

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in default_paths:
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    if config_path is None:
        searched = ", ".join(str(p) for p in default_paths)
        raise FileNotFoundError(f"No config file found. Searched: {searched}")

    try:
        with config_path.open("rb") as f:
            raw_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    raw_config = _resolve_env(raw_config)

    try:
        return LightauthConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e


def get_default_config() -> LightauthConfig:
    """Default configuration with environment overrides applied."""
    return LightauthConfig.model_validate(_resolve_env({}))
