"""
itempool - Cache Item Pool

A deferred-write cache item pool over pluggable key/value storage
(in-memory or Redis).
"""

__version__ = "1.0.0"

from .cache import CacheItem, CacheItemPool, ExceptionLogger, create_pool
from .errors import (
    BackendError,
    BackendRuntimeError,
    BackendValidationError,
    CacheError,
    ConfigurationError,
    InvalidArgumentError,
    ItemPoolError,
)

__all__ = [
    "CacheItem",
    "CacheItemPool",
    "ExceptionLogger",
    "create_pool",
    "ItemPoolError",
    "CacheError",
    "ConfigurationError",
    "InvalidArgumentError",
    "BackendError",
    "BackendValidationError",
    "BackendRuntimeError",
]
