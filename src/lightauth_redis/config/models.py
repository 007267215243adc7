"""Configuration models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field, SecretStr


class ConfigError(Exception):
    """Configuration error."""

    pass


class RedisConfig(BaseModel):
    """Connection settings for the Redis store.

    ``url`` takes precedence over host/port/db when set. The password is kept
    out of the URL so it can come from the environment.
    """

    url: str | None = None
    host: str = "localhost"
    port: int = Field(default=6379, ge=1, le=65535)
    db: int = Field(default=0, ge=0)
    password: SecretStr | None = None
    # Connection-level timeout; reconstruction has no deadline of its own
    socket_timeout: float | None = 5.0
    key_scan_count: int = Field(default=500, ge=1)


class AllocatorConfig(BaseModel):
    """Identifier allocation settings."""

    id_length: int = Field(default=16, ge=4)
    max_attempts: int = Field(default=64, ge=1)


class LightauthConfig(BaseModel):
    """Root configuration model."""

    redis: RedisConfig = Field(default_factory=RedisConfig)
    allocator: AllocatorConfig = Field(default_factory=AllocatorConfig)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
