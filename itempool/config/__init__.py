"""
itempool - Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config, reset_config
from .schemas import (
    Environment,
    ItemPoolConfig,
    LogFormat,
    LogLevel,
    StorageBackend,
    StorageConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    "reset_config",
    # Main config
    "ItemPoolConfig",
    # Enums
    "Environment",
    "StorageBackend",
    "LogLevel",
    "LogFormat",
    # Config sections
    "StorageConfig",
]
