"""
itempool - Memory Storage Backend

In-memory storage with LRU eviction and TTL support.
Suitable for single-process deployments and tests.
"""

import logging
import time
from collections import OrderedDict
from typing import Any

from ..errors import BackendError, BackendRuntimeError, BackendValidationError
from .interface import (
    Capabilities,
    ClearByNamespaceInterface,
    FlushableInterface,
    StorageInterface,
    StorageOptions,
)

logger = logging.getLogger(__name__)


class MemoryStorage(StorageInterface, FlushableInterface, ClearByNamespaceInterface):
    """
    In-memory storage backend with LRU eviction.

    Features:
    - LRU eviction when max_size is reached
    - TTL taken from ``options.ttl`` at write time
    - Namespaced keys, clearable per namespace
    """

    CAPABILITIES = Capabilities(static_ttl=True, min_ttl=1, max_ttl=0, namespace_separator=":")

    def __init__(
        self,
        max_size: int = 1000,
        default_ttl: int = 3600,
        namespace: str = "itempool",
    ):
        """
        Initialize memory storage backend.

        Args:
            max_size: Maximum number of entries (LRU eviction when exceeded)
            default_ttl: Default TTL in seconds (0 = no expiry)
            namespace: Key namespace
        """
        super().__init__(StorageOptions(ttl=default_ttl, namespace=namespace))
        self.max_size = max_size

        # Storage: namespaced key -> (value, expiry_time)
        self._store: OrderedDict[str, tuple[Any, float | None]] = OrderedDict()

        # Stats
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0
        self._evictions = 0

    def get_capabilities(self) -> Capabilities:
        return self.CAPABILITIES

    # ------------ Helpers ------------

    def _fail(self, error: BackendError) -> BackendError:
        return self._notify_exception(error)

    def _make_key(self, key: str) -> str:
        """Create namespaced storage key."""
        if not isinstance(key, str) or not key:
            raise self._fail(
                BackendValidationError(
                    f"Storage key must be a non-empty string; {key!r} given",
                    details={"key": repr(key)},
                    backend="memory",
                )
            )
        namespace = self._options.namespace
        if not namespace:
            return key
        return f"{namespace}{self.CAPABILITIES.namespace_separator}{key}"

    def _is_expired(self, expiry: float | None) -> bool:
        """Check if entry is expired."""
        if expiry is None:
            return False
        return time.time() > expiry

    def _lookup(self, storage_key: str) -> tuple[bool, Any]:
        """Return (found, value), dropping the entry if it has expired."""
        entry = self._store.get(storage_key)
        if entry is None:
            return False, None

        value, expiry = entry
        if self._is_expired(expiry):
            del self._store[storage_key]
            return False, None

        return True, value

    # ------------ Core Interface ------------

    async def get_items(self, keys: list[str]) -> dict[str, Any]:
        """Retrieve multiple values."""
        storage_keys = [(key, self._make_key(key)) for key in keys]

        try:
            result: dict[str, Any] = {}
            for key, storage_key in storage_keys:
                found, value = self._lookup(storage_key)
                if not found:
                    self._misses += 1
                    continue

                self._store.move_to_end(storage_key)
                self._hits += 1
                result[key] = value

            return result
        except Exception as e:
            logger.error(
                f"Unexpected error getting {len(keys)} key(s) from memory storage: {e}",
                extra={"key_count": len(keys), "namespace": self._options.namespace, "error": str(e)},
                exc_info=True,
            )
            raise self._fail(BackendRuntimeError(f"Failed to read from memory storage: {e}", backend="memory")) from e

    async def has_item(self, key: str) -> bool:
        """Check if key exists and is not expired."""
        storage_key = self._make_key(key)
        found, _ = self._lookup(storage_key)
        return found

    async def set_item(self, key: str, value: Any) -> bool:
        """Store value using the current options.ttl."""
        storage_key = self._make_key(key)
        ttl = self._options.ttl

        try:
            expiry = time.time() + ttl if ttl > 0 else None

            # Evict if at capacity and key is new
            if storage_key not in self._store and len(self._store) >= self.max_size:
                evicted_key, _ = self._store.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Evicted key from memory storage: {evicted_key}")

            self._store[storage_key] = (value, expiry)
            self._store.move_to_end(storage_key)
            self._sets += 1

            return True
        except Exception as e:
            logger.error(
                f"Unexpected error setting key '{key}' in memory storage: {e}",
                extra={"key": key, "namespace": self._options.namespace, "ttl": ttl, "error": str(e)},
                exc_info=True,
            )
            raise self._fail(BackendRuntimeError(f"Failed to write to memory storage: {e}", backend="memory")) from e

    async def remove_items(self, keys: list[str]) -> list[str]:
        """Remove keys, returning those that did not exist."""
        storage_keys = [(key, self._make_key(key)) for key in keys]

        not_removed = []
        for key, storage_key in storage_keys:
            if self._store.pop(storage_key, None) is None:
                not_removed.append(key)
            else:
                self._deletes += 1

        return not_removed

    async def flush(self) -> bool:
        """Remove all entries, whatever their namespace."""
        size = len(self._store)
        self._store.clear()
        logger.info(f"Flushed {size} entries from memory storage")
        return True

    async def clear_by_namespace(self, namespace: str) -> bool:
        """Remove all entries stored under ``namespace``."""
        if not namespace:
            raise self._fail(BackendValidationError("No namespace given", backend="memory"))

        prefix = f"{namespace}{self.CAPABILITIES.namespace_separator}"
        doomed = [k for k in self._store if k.startswith(prefix)]
        for storage_key in doomed:
            del self._store[storage_key]

        logger.info(f"Cleared {len(doomed)} entries from memory storage namespace '{namespace}'")
        return True

    async def get_stats(self) -> dict[str, Any]:
        """Get storage statistics."""
        total_requests = self._hits + self._misses
        hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0.0

        return {
            "backend": "memory",
            "size": len(self._store),
            "max_size": self.max_size,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(hit_rate, 2),
            "sets": self._sets,
            "deletes": self._deletes,
            "evictions": self._evictions,
            "namespace": self._options.namespace,
            "ttl": self._options.ttl,
        }
