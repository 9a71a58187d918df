"""
itempool - Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.
All configuration is read from environment variables and validated at startup.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Environment(str, Enum):
    """Runtime environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class StorageBackend(str, Enum):
    """Supported storage backends."""

    MEMORY = "memory"
    REDIS = "redis"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    TEXT = "text"


class StorageConfig(BaseModel):
    """Storage backend configuration."""

    backend: StorageBackend = Field(default=StorageBackend.MEMORY, description="Storage backend to use")
    # The pool refuses storages without a positive minimum TTL, so 0 (no expiry) is not allowed here.
    ttl_seconds: int = Field(default=3600, ge=1, description="Default TTL in seconds")
    max_size: int = Field(default=1000, ge=1, description="Max entries (memory backend)")
    namespace: str = Field(default="itempool", description="Key namespace; empty disables namespace clearing")

    # Redis-specific settings (only used when backend=redis)
    redis_url: str | None = Field(default=None, description="Redis connection URL")
    redis_max_connections: int = Field(default=10, ge=1, description="Redis connection pool size")
    redis_socket_timeout: int = Field(default=5, ge=1, description="Redis socket timeout in seconds")

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """Reject namespaces containing the namespace separator."""
        if ":" in v:
            raise ValueError("namespace must not contain ':'")
        return v.strip()

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: str | None, info: Any) -> str | None:
        """Ensure redis_url is provided when backend is redis."""
        backend = info.data.get("backend")
        if backend == StorageBackend.REDIS and not v:
            raise ValueError("redis_url is required when storage backend is 'redis'")
        return v


class ItemPoolConfig(BaseModel):
    """Root configuration for itempool."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Runtime environment")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_format: LogFormat = Field(default=LogFormat.JSON, description="Log output format")

    storage: StorageConfig = Field(default_factory=StorageConfig)

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)
