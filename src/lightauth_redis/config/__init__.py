"""Configuration models and loading."""

from lightauth_redis.config.loader import get_default_config, load_config
from lightauth_redis.config.models import (
    AllocatorConfig,
    ConfigError,
    LightauthConfig,
    RedisConfig,
)

__all__ = [
    "AllocatorConfig",
    "ConfigError",
    "LightauthConfig",
    "RedisConfig",
    "get_default_config",
    "load_config",
]
