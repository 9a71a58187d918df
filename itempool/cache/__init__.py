"""
itempool - Cache Module

Cache item pool over pluggable key/value storage.

- item.py: CacheItem, the value object handed to callers
- pool.py: CacheItemPool, the storage adapter
- keys.py: key validation
- translator.py: storage error translation
- exception_logger.py: logging of storage errors
- factory.py: create_pool() from configuration

Usage:
    from itempool.cache import create_pool

    async with create_pool() as pool:
        item = await pool.get_item("key")
        await pool.save(item.set("value"))
"""

from .exception_logger import ExceptionLogger
from .factory import create_pool
from .interface import CacheItemInterface, CacheItemPoolInterface
from .item import CacheItem
from .keys import validate_key, validate_keys
from .pool import CacheItemPool

__all__ = [
    # Factory
    "create_pool",
    # Interfaces
    "CacheItemInterface",
    "CacheItemPoolInterface",
    # Implementations
    "CacheItem",
    "CacheItemPool",
    "ExceptionLogger",
    # Key validation
    "validate_key",
    "validate_keys",
]
