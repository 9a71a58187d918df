"""
itempool - Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a singleton configuration instance for the runtime.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import ItemPoolConfig

logger = logging.getLogger(__name__)

_config_instance: ItemPoolConfig | None = None


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> ItemPoolConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated ItemPoolConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    if env_file:
        env_path = Path(env_file)
    else:
        env_path = Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    # Redis if REDIS_URL is set, else memory
    redis_url = os.getenv("REDIS_URL")
    storage_backend = "redis" if redis_url else "memory"

    try:
        config_dict = {
            "environment": os.getenv("ENVIRONMENT", "development"),
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
            "log_format": os.getenv("LOG_FORMAT", "json"),
            "storage": {
                "backend": os.getenv("STORAGE_BACKEND", storage_backend),
                "ttl_seconds": int(os.getenv("STORAGE_TTL_SECONDS", "3600")),
                "max_size": int(os.getenv("STORAGE_MAX_SIZE", "1000")),
                "namespace": os.getenv("STORAGE_NAMESPACE", "itempool"),
                "redis_url": redis_url,
                "redis_max_connections": int(os.getenv("REDIS_MAX_CONNECTIONS", "10")),
                "redis_socket_timeout": int(os.getenv("REDIS_SOCKET_TIMEOUT", "5")),
            },
        }
    except ValueError as e:
        logger.error(f"Non-numeric value in numeric environment variable: {e}")
        raise ConfigurationError(
            f"Invalid numeric environment variable: {e}",
            details={"error": str(e)},
        ) from e

    try:
        _config_instance = ItemPoolConfig(**config_dict)  # type: ignore[arg-type]
        logger.info(
            f"Configuration loaded successfully (environment: {_config_instance.environment})",
            extra={"environment": _config_instance.environment, "storage_backend": _config_instance.storage.backend},
        )
        return _config_instance
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors(), "config_dict_keys": list(config_dict.keys())},
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables and configuration.",
            details={"validation_errors": e.errors()},
        ) from e


def get_config() -> ItemPoolConfig:
    """
    Get the current configuration instance.

    Loads it from the environment on first access.
    """
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> ItemPoolConfig:
    """
    Force reload configuration.

    Args:
        env_file: Optional path to .env file

    Returns:
        Reloaded ItemPoolConfig instance
    """
    return load_config(env_file=env_file, reload=True)


def reset_config() -> None:
    """Forget the loaded configuration. Used by tests."""
    global _config_instance
    _config_instance = None
