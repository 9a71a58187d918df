"""
itempool - CacheItem Tests

Covers construction invariants, value mutation and expiration handling.
"""

from datetime import UTC, datetime, timedelta

import pytest

from itempool.cache.item import CacheItem
from itempool.errors import InvalidArgumentError


class TestCacheItem:
    """Test suite for CacheItem."""

    def test_constructor_is_hit(self) -> None:
        """A hit keeps its value."""
        item = CacheItem("key", "value", True)
        assert item.get_key() == "key"
        assert item.key == "key"
        assert item.get() == "value"
        assert item.is_hit() is True

    def test_constructor_is_not_hit(self) -> None:
        """A miss never carries a value."""
        item = CacheItem("key", "value", False)
        assert item.get_key() == "key"
        assert item.get() is None
        assert item.is_hit() is False

    def test_set(self) -> None:
        """set() mutates in place and returns the item."""
        item = CacheItem("key", "value", True)
        returned = item.set("value2")
        assert returned is item
        assert item.get() == "value2"

    def test_set_is_hit(self) -> None:
        """set_is_hit() flips the flag and returns the item."""
        item = CacheItem("key", None, False)
        assert item.set_is_hit(True) is item
        assert item.is_hit() is True

    def test_new_item_has_no_expiration(self) -> None:
        """Items start without an expiration."""
        assert CacheItem("key", "value", True).get_expiration() is None

    def test_expires_at_datetime(self) -> None:
        """expires_at() stores the given datetime."""
        item = CacheItem("key", "value", True)
        when = datetime.now(UTC) + timedelta(hours=1)
        assert item.expires_at(when) is item
        assert item.get_expiration() == when

    def test_expires_at_none_clears(self) -> None:
        """expires_at(None) removes a previously set expiration."""
        item = CacheItem("key", "value", True)
        item.expires_after(60)
        assert item.expires_at(None) is item
        assert item.get_expiration() is None

    @pytest.mark.parametrize("invalid", ["tomorrow", 3600, 1.5, object()])
    def test_expires_at_invalid_raises(self, invalid: object) -> None:
        """expires_at() accepts only datetimes and None."""
        with pytest.raises(InvalidArgumentError):
            CacheItem("key", "value", True).expires_at(invalid)  # type: ignore[arg-type]

    def test_expires_after_int(self) -> None:
        """An int is a number of seconds from now."""
        item = CacheItem("key", "value", True)
        assert item.expires_after(3600) is item

        expiration = item.get_expiration()
        assert expiration is not None
        remaining = (expiration - datetime.now(UTC)).total_seconds()
        assert 3598 < remaining <= 3600

    def test_expires_after_timedelta(self) -> None:
        """A timedelta is added to now."""
        item = CacheItem("key", "value", True)
        assert item.expires_after(timedelta(hours=1)) is item

        expiration = item.get_expiration()
        assert expiration is not None
        remaining = (expiration - datetime.now(UTC)).total_seconds()
        assert 3598 < remaining <= 3600

    def test_expires_after_is_timezone_aware(self) -> None:
        """Computed expirations can be compared with aware datetimes."""
        item = CacheItem("key", "value", True).expires_after(10)
        expiration = item.get_expiration()
        assert expiration is not None
        assert expiration.tzinfo is not None

    @pytest.mark.parametrize("invalid", ["3600", 1.5, True, None, object()])
    def test_expires_after_invalid_raises(self, invalid: object) -> None:
        """expires_after() accepts only ints and timedeltas."""
        with pytest.raises(InvalidArgumentError):
            CacheItem("key", "value", True).expires_after(invalid)  # type: ignore[arg-type]
