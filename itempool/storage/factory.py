"""
itempool - Storage Factory

Canonical factory for creating storage backends from configuration.

Key points:
- Select backend with STORAGE_BACKEND=memory|redis (redis is picked
  automatically when REDIS_URL is set)
- Redis is imported lazily so the memory backend works without it
- Instances are kept in a named registry; close them with close_all_storages()

Examples:
    from itempool.storage.factory import create_storage

    storage = create_storage()

    from itempool.config import StorageBackend, StorageConfig
    cfg = StorageConfig(backend=StorageBackend.MEMORY, ttl_seconds=600)
    mem = create_storage(cfg, name="test")
"""

from __future__ import annotations

import logging

from ..config import StorageBackend, StorageConfig, get_config
from ..errors import ConfigurationError
from .interface import StorageInterface
from .memory import MemoryStorage

logger = logging.getLogger(__name__)

# Global storage instances registry
_storage_instances: dict[str, StorageInterface] = {}


def _create_memory_storage(config: StorageConfig) -> StorageInterface:
    """Internal helper to construct a memory storage backend."""
    return MemoryStorage(
        max_size=config.max_size,
        default_ttl=config.ttl_seconds,
        namespace=config.namespace,
    )


def _create_redis_storage(config: StorageConfig) -> StorageInterface:
    """Internal helper to construct a redis storage backend with lazy import."""
    if not config.redis_url:
        raise ConfigurationError(
            "REDIS_URL must be set when STORAGE_BACKEND=redis",
            details={"env": "REDIS_URL", "backend": "redis"},
        )

    try:
        from .redis import RedisStorage
    except ImportError as e:
        logger.error(
            "Redis backend selected but redis client is not installed",
            extra={"package": "redis>=5.0.0", "error": str(e)},
        )
        raise ConfigurationError(
            "Redis backend selected but redis client is unavailable. Install with: pip install 'redis>=5.0.0'",
            details={"package": "redis>=5.0.0", "error": str(e), "backend": "redis"},
        ) from e

    return RedisStorage(
        redis_url=config.redis_url,
        namespace=config.namespace,
        default_ttl=config.ttl_seconds,
        max_connections=config.redis_max_connections,
        socket_timeout=config.redis_socket_timeout,
    )


def create_storage(
    config: StorageConfig | None = None,
    name: str = "default",
) -> StorageInterface:
    """
    Create a storage backend instance based on configuration.

    Args:
        config: Storage configuration (uses global config if not provided)
        name: Instance name (for multiple storage instances)

    Returns:
        Configured storage backend instance

    Raises:
        ConfigurationError: If configuration is invalid or backend unavailable
    """
    if name in _storage_instances:
        logger.debug("Returning existing storage instance: %s", name)
        return _storage_instances[name]

    if config is None:
        config = get_config().storage

    logger.info(
        "Creating storage instance '%s' with backend: %s",
        name,
        config.backend,
        extra={"storage_name": name, "backend": str(config.backend)},
    )

    if config.backend == StorageBackend.MEMORY:
        storage = _create_memory_storage(config)
    elif config.backend == StorageBackend.REDIS:
        storage = _create_redis_storage(config)
    else:
        raise ConfigurationError(
            f"Unknown storage backend: {config.backend}",
            details={"backend": str(config.backend), "supported": ["memory", "redis"]},
        )

    _storage_instances[name] = storage
    return storage


def get_storage(name: str = "default") -> StorageInterface:
    """
    Get an existing storage instance by name, creating it from the
    global configuration if it does not exist yet.
    """
    if name not in _storage_instances:
        logger.debug("Storage instance '%s' not found, creating new instance", name)
        return create_storage(name=name)

    return _storage_instances[name]


async def close_all_storages() -> None:
    """
    Close all storage instances and release resources.

    Call during graceful shutdown, after the pools using them are closed.
    """
    if not _storage_instances:
        logger.debug("No storage instances to close")
        return

    logger.info("Closing %d storage instance(s)...", len(_storage_instances))

    for name, storage in list(_storage_instances.items()):
        try:
            await storage.close()
        except Exception as e:
            logger.error(
                "Error closing storage instance '%s': %s",
                name,
                e,
                extra={"storage_name": name, "error": str(e)},
                exc_info=True,
            )

    _storage_instances.clear()


def reset_storage_factory() -> None:
    """
    Forget all instance references without closing them.

    Warning: Only use this in testing contexts.
    """
    count = len(_storage_instances)
    _storage_instances.clear()
    logger.debug("Reset storage factory, cleared %d instance reference(s)", count)


def list_storage_instances() -> list[str]:
    """List all registered storage instance names."""
    return list(_storage_instances.keys())
