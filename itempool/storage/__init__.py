"""
itempool - Storage Module

Key/value storage backends consumed by the item pool.

- interface.py: StorageInterface plus the optional capability interfaces
- memory.py: in-process backend (always available)
- redis.py: Redis backend, imported lazily by factory.py
- factory.py: creation from configuration
"""

from .factory import (
    close_all_storages,
    create_storage,
    get_storage,
    list_storage_instances,
    reset_storage_factory,
)
from .interface import (
    Capabilities,
    ClearByNamespaceInterface,
    FlushableInterface,
    StorageInterface,
    StorageOptions,
)
from .memory import MemoryStorage

__all__ = [
    # Factory functions
    "create_storage",
    "get_storage",
    "close_all_storages",
    "list_storage_instances",
    "reset_storage_factory",
    # Interfaces
    "StorageInterface",
    "FlushableInterface",
    "ClearByNamespaceInterface",
    "StorageOptions",
    "Capabilities",
    # Backends
    "MemoryStorage",
]
