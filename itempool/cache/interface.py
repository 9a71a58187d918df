"""
itempool - Cache Contracts

Abstract interfaces for cache items and the pools that produce them.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any


class CacheItemInterface(ABC):
    """
    A key/value pair held by a pool.

    Items are produced by a pool; callers mutate them and hand them back to
    the same pool to persist.
    """

    @abstractmethod
    def get_key(self) -> str:
        """Return the item's key."""
        pass

    @abstractmethod
    def get(self) -> Any:
        """Return the value, or None on a miss."""
        pass

    @abstractmethod
    def is_hit(self) -> bool:
        """Whether the lookup that produced this item found a value."""
        pass

    @abstractmethod
    def set(self, value: Any) -> "CacheItemInterface":
        """Set the value and return the item."""
        pass

    @abstractmethod
    def expires_at(self, expiration: datetime | None) -> "CacheItemInterface":
        """Set an absolute expiration; None means the storage default."""
        pass

    @abstractmethod
    def expires_after(self, time: int | timedelta) -> "CacheItemInterface":
        """Set the expiration relative to now."""
        pass


class CacheItemPoolInterface(ABC):
    """
    A pool of cache items backed by some storage.

    Methods taking keys raise InvalidArgumentError for malformed keys.
    Storage failures are reported as False or as misses, never raised.
    """

    @abstractmethod
    async def get_item(self, key: str) -> CacheItemInterface:
        """Return the item for ``key``; a miss if nothing is stored."""
        pass

    @abstractmethod
    async def get_items(self, keys: list[str]) -> dict[str, CacheItemInterface]:
        """Return one item per requested key, in request order."""
        pass

    @abstractmethod
    async def has_item(self, key: str) -> bool:
        """Whether a value is stored or pending for ``key``."""
        pass

    @abstractmethod
    async def clear(self) -> bool:
        """Drop every item in the pool."""
        pass

    @abstractmethod
    async def delete_item(self, key: str) -> bool:
        """Remove ``key`` from the pool."""
        pass

    @abstractmethod
    async def delete_items(self, keys: list[str]) -> bool:
        """Remove several keys from the pool."""
        pass

    @abstractmethod
    async def save(self, item: CacheItemInterface) -> bool:
        """Persist ``item`` immediately."""
        pass

    @abstractmethod
    async def save_deferred(self, item: CacheItemInterface) -> bool:
        """Queue ``item`` to be persisted on the next commit."""
        pass

    @abstractmethod
    async def commit(self) -> bool:
        """Persist every queued item."""
        pass
