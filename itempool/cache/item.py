"""
itempool - Cache Item

The item type handed out by CacheItemPool.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from ..errors import InvalidArgumentError
from .interface import CacheItemInterface


class CacheItem(CacheItemInterface):
    """
    Key, value, hit flag and optional absolute expiration.

    A miss never carries a value: constructing with ``is_hit=False`` discards
    whatever value was passed.
    """

    __slots__ = ("_key", "_value", "_is_hit", "_expiration")

    def __init__(self, key: str, value: Any, is_hit: bool):
        self._key = key
        self._value = value if is_hit else None
        self._is_hit = is_hit
        self._expiration: datetime | None = None

    def __repr__(self) -> str:
        return f"CacheItem(key={self._key!r}, is_hit={self._is_hit}, expiration={self._expiration!r})"

    @property
    def key(self) -> str:
        return self._key

    def get_key(self) -> str:
        return self._key

    def get(self) -> Any:
        return self._value

    def is_hit(self) -> bool:
        return self._is_hit

    def set_is_hit(self, is_hit: bool) -> CacheItem:
        """
        Set the hit flag.

        Called by CacheItemPool.save_deferred(); not intended for other callers.
        """
        self._is_hit = is_hit
        return self

    def set(self, value: Any) -> CacheItem:
        self._value = value
        return self

    def expires_at(self, expiration: datetime | None = None) -> CacheItem:
        if not (expiration is None or isinstance(expiration, datetime)):
            raise InvalidArgumentError(
                "expiration must be None or a datetime",
                details={"given": type(expiration).__name__},
            )

        self._expiration = expiration
        return self

    def expires_after(self, time: int | timedelta) -> CacheItem:
        if isinstance(time, timedelta):
            interval = time
        elif isinstance(time, int) and not isinstance(time, bool):
            interval = timedelta(seconds=time)
        else:
            raise InvalidArgumentError(
                f'Invalid time "{type(time).__name__}"',
                details={"given": type(time).__name__},
            )

        self._expiration = datetime.now().astimezone() + interval
        return self

    def get_expiration(self) -> datetime | None:
        """
        Return the datetime the item was explicitly set to expire at, or None.

        Always None for items read from storage; their lifetime is governed by
        the storage's own TTL.
        """
        return self._expiration
