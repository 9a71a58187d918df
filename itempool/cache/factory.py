"""
itempool - Pool Factory

Builds a CacheItemPool over a configured storage backend, with storage errors
logged through an ExceptionLogger.

Examples:
    from itempool.cache import create_pool

    async with create_pool() as pool:
        item = await pool.get_item("answer")
"""

from __future__ import annotations

import logging

from ..config import StorageConfig
from ..storage.factory import create_storage
from .exception_logger import ExceptionLogger, has_exception_logger
from .pool import CacheItemPool

logger = logging.getLogger(__name__)


def create_pool(
    config: StorageConfig | None = None,
    name: str = "default",
    error_logger: logging.Logger | None = None,
) -> CacheItemPool:
    """
    Create a pool over the named storage instance.

    Args:
        config: Storage configuration (uses global config if not provided)
        name: Storage instance name, shared with the storage factory registry
        error_logger: Logger receiving storage errors

    Returns:
        A new CacheItemPool

    Raises:
        ConfigurationError: If the storage cannot be created or lacks a
            capability the pool needs
    """
    storage = create_storage(config, name=name)

    if not has_exception_logger(storage):
        ExceptionLogger(storage, error_logger)

    pool = CacheItemPool(storage)
    logger.debug("Created cache item pool over storage '%s'", name, extra={"storage_name": name})
    return pool
