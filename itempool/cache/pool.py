"""
itempool - Cache Item Pool

Adapts any StorageInterface implementation to the CacheItemPoolInterface
contract.

The storage must be flushable and support a static TTL, since every item
may carry its own expiration and the pool applies it by temporarily changing
the storage's TTL option for the duration of the write.

Usage:
    async with CacheItemPool(storage) as pool:
        item = await pool.get_item("greeting")
        if not item.is_hit():
            item.set("hello").expires_after(60)
            await pool.save_deferred(item)
    # leaving the block commits deferred items
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import datetime
from types import TracebackType

from ..errors import ConfigurationError, ErrorCode, InvalidArgumentError
from ..storage.interface import ClearByNamespaceInterface, FlushableInterface, StorageInterface
from .interface import CacheItemInterface, CacheItemPoolInterface
from .item import CacheItem
from .keys import validate_key, validate_keys
from .translator import backend_call

logger = logging.getLogger(__name__)


class CacheItemPool(CacheItemPoolInterface):
    """
    Cache item pool over a key/value storage backend.

    Writes are either saved immediately or buffered with save_deferred() and
    written by commit(). Items that fail to commit stay buffered, so commit()
    can be retried.

    The pool does not own the storage: close() commits pending items but
    leaves the storage open.

    Saves are serialized per storage through ``storage.ttl_lock`` because the
    TTL override changes options shared by every user of that storage.
    """

    def __init__(self, storage: StorageInterface):
        """
        Args:
            storage: Flushable storage with static TTL support

        Raises:
            ConfigurationError: If the storage lacks a required capability
        """
        if not isinstance(storage, FlushableInterface):
            raise ConfigurationError(
                f"Storage {type(storage).__name__} does not implement {FlushableInterface.__name__}",
                details={"storage": type(storage).__name__, "capability": "flush"},
                code=ErrorCode.MISSING_CAPABILITY,
            )

        capabilities = storage.get_capabilities()
        if not (capabilities.static_ttl and capabilities.min_ttl > 0):
            raise ConfigurationError(
                f"Storage {type(storage).__name__} does not support static TTL",
                details={
                    "storage": type(storage).__name__,
                    "static_ttl": capabilities.static_ttl,
                    "min_ttl": capabilities.min_ttl,
                },
                code=ErrorCode.MISSING_CAPABILITY,
            )

        self._storage = storage
        self._deferred: dict[str, CacheItem] = {}

    async def __aenter__(self) -> CacheItemPool:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def storage(self) -> StorageInterface:
        return self._storage

    @property
    def deferred_count(self) -> int:
        """Number of items waiting for commit()."""
        return len(self._deferred)

    async def close(self) -> bool:
        """
        Commit any deferred items that have not been committed.

        Returns:
            True if nothing is left uncommitted
        """
        committed = await self.commit()
        if not committed:
            logger.warning(
                f"Closing cache item pool with {len(self._deferred)} uncommitted item(s)",
                extra={"keys": list(self._deferred)},
            )
        return committed

    async def get_item(self, key: str) -> CacheItem:
        items = await self.get_items([key])
        return items[key]

    async def get_items(self, keys: Iterable[str] = ()) -> dict[str, CacheItem]:
        """
        Return one item per distinct requested key, in request order.

        Deferred items are returned as buffered; the rest are looked up in
        one storage call. Keys the storage does not return are misses.
        """
        keys = list(dict.fromkeys(validate_keys(keys)))

        found: dict[str, CacheItem] = {key: self._deferred[key] for key in keys if key in self._deferred}
        remaining = [key for key in keys if key not in found]

        if remaining:
            values = {}
            with backend_call("get_items", key_count=len(remaining)):
                values = await self._storage.get_items(remaining)

            for key in remaining:
                if key in values:
                    found[key] = CacheItem(key, values[key], True)
                else:
                    found[key] = CacheItem(key, None, False)

        return {key: found[key] for key in keys}

    async def has_item(self, key: str) -> bool:
        validate_key(key)

        if key in self._deferred:
            return True

        has_item = False
        with backend_call("has_item", key=key):
            has_item = await self._storage.has_item(key)

        return has_item

    async def clear(self) -> bool:
        """
        Drop deferred items, then clear the storage.

        If the storage supports namespaces and one is set, only that namespace
        is cleared; otherwise the whole storage is flushed. Deferred items are
        dropped even when clearing the storage fails.
        """
        self._deferred = {}

        cleared = False
        with backend_call("clear", absorb_validation=True):
            namespace = self._storage.get_options().namespace
            if isinstance(self._storage, ClearByNamespaceInterface) and namespace:
                cleared = await self._storage.clear_by_namespace(namespace)
            else:
                cleared = await self._storage.flush()  # type: ignore[attr-defined]

        return cleared

    async def delete_item(self, key: str) -> bool:
        return await self.delete_items([key])

    async def delete_items(self, keys: Iterable[str]) -> bool:
        """
        Remove keys from the deferred buffer and from storage.

        The buffer removal is kept even if the storage call fails.
        """
        keys = list(dict.fromkeys(validate_keys(keys)))

        for key in keys:
            self._deferred.pop(key, None)

        if not keys:
            return True

        with backend_call("delete_items", key_count=len(keys)) as outcome:
            await self._storage.remove_items(keys)

        return not outcome.failed

    async def save(self, item: CacheItemInterface) -> bool:
        """
        Write an item to storage now.

        An item expiration is applied by setting the storage TTL for this one
        write; the original TTL is restored afterwards whatever happens.

        An expiration already in the past is written with TTL 0, which the
        shipped backends treat as "no expiry", so such an item is kept until
        deleted or evicted.
        """
        item = self._check_item(item)
        key = validate_key(item.get_key())

        async with self._storage.ttl_lock:
            options = self._storage.get_options()
            ttl = options.ttl
            saved = False
            try:
                with backend_call("save", key=key):
                    expiration = item.get_expiration()
                    if expiration is not None:
                        options.ttl = _seconds_until(expiration)

                    saved = await self._storage.set_item(key, item.get())
            finally:
                options.ttl = ttl

        return bool(saved)

    async def save_deferred(self, item: CacheItemInterface) -> bool:
        item = self._check_item(item)
        key = validate_key(item.get_key())

        # Deferred items are always a hit
        item.set_is_hit(True)
        self._deferred[key] = item

        return True

    async def commit(self) -> bool:
        """
        Save every deferred item.

        Items that fail to save stay deferred.

        Returns:
            True if no deferred items remain
        """
        not_saved: dict[str, CacheItem] = {}

        for key, item in self._deferred.items():
            if not await self.save(item):
                not_saved[key] = item

        if not_saved:
            logger.info(
                f"Commit left {len(not_saved)} of {len(self._deferred)} deferred item(s) unsaved",
                extra={"keys": list(not_saved)},
            )
        self._deferred = not_saved

        return not self._deferred

    @staticmethod
    def _check_item(item: CacheItemInterface) -> CacheItem:
        if not isinstance(item, CacheItem):
            raise InvalidArgumentError(
                f"item must be an instance of {CacheItem.__name__}",
                details={"given": type(item).__name__},
            )
        return item


def _seconds_until(expiration: datetime) -> int:
    """Whole seconds from now until ``expiration``, never negative."""
    now = datetime.now(expiration.tzinfo)
    return max(0, math.ceil((expiration - now).total_seconds()))
