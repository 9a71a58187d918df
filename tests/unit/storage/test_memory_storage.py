"""
itempool - Memory Storage Tests

Tests LRU eviction, TTL taken from options, namespaces and error signaling.
"""

import asyncio

import pytest

from itempool.cache.pool import CacheItemPool
from itempool.errors import BackendValidationError
from itempool.storage.interface import ClearByNamespaceInterface, FlushableInterface
from itempool.storage.memory import MemoryStorage


class TestMemoryStorage:
    """Test suite for MemoryStorage."""

    @pytest.fixture
    def storage(self) -> MemoryStorage:
        """Create a fresh memory storage for each test."""
        return MemoryStorage(max_size=100, default_ttl=3600, namespace="test")

    async def test_initialization(self) -> None:
        """Test storage initialization with custom parameters."""
        storage = MemoryStorage(max_size=100, default_ttl=1800, namespace="custom")
        assert storage.max_size == 100
        assert storage.get_options().ttl == 1800
        assert storage.get_options().namespace == "custom"

        stats = await storage.get_stats()
        assert stats["hits"] == 0
        assert stats["misses"] == 0
        assert stats["size"] == 0

    def test_capabilities_accepted_by_pool(self, storage: MemoryStorage) -> None:
        """The memory storage has everything the pool requires."""
        assert isinstance(storage, FlushableInterface)
        assert isinstance(storage, ClearByNamespaceInterface)
        capabilities = storage.get_capabilities()
        assert capabilities.static_ttl is True
        assert capabilities.min_ttl > 0
        CacheItemPool(storage)

    async def test_set_and_get(self, storage: MemoryStorage) -> None:
        assert await storage.set_item("key1", "value1") is True
        assert await storage.get_items(["key1"]) == {"key1": "value1"}

        stats = await storage.get_stats()
        assert stats["hits"] == 1
        assert stats["sets"] == 1

    async def test_get_items_omits_missing(self, storage: MemoryStorage) -> None:
        for i in range(5):
            await storage.set_item(f"key{i}", f"value{i}")

        result = await storage.get_items(["key0", "key2", "key4", "nonexistent"])
        assert result == {"key0": "value0", "key2": "value2", "key4": "value4"}

    async def test_stores_none(self, storage: MemoryStorage) -> None:
        """A stored None is a hit, not a miss."""
        await storage.set_item("key1", None)
        assert await storage.get_items(["key1"]) == {"key1": None}
        assert await storage.has_item("key1") is True

    async def test_has_item(self, storage: MemoryStorage) -> None:
        assert await storage.has_item("key1") is False
        await storage.set_item("key1", "value1")
        assert await storage.has_item("key1") is True

    async def test_remove_items(self, storage: MemoryStorage) -> None:
        for i in range(3):
            await storage.set_item(f"key{i}", i)

        not_removed = await storage.remove_items(["key0", "key2", "nonexistent"])
        assert not_removed == ["nonexistent"]
        assert await storage.get_items(["key0", "key1", "key2"]) == {"key1": 1}

    async def test_ttl_read_from_options(self, storage: MemoryStorage) -> None:
        """Changing options.ttl affects the next write only."""
        options = storage.get_options()
        options.ttl = 1
        await storage.set_item("short", "value")
        options.ttl = 0
        await storage.set_item("forever", "value")

        await asyncio.sleep(2.0)

        assert await storage.get_items(["short", "forever"]) == {"forever": "value"}

    async def test_lru_eviction(self) -> None:
        storage = MemoryStorage(max_size=10, default_ttl=3600, namespace="test")
        for i in range(10):
            await storage.set_item(f"key{i}", f"value{i}")

        # Access key0 to make it recently used
        await storage.get_items(["key0"])
        await storage.set_item("key10", "value10")

        stats = await storage.get_stats()
        assert stats["size"] == 10
        assert stats["evictions"] == 1
        assert await storage.has_item("key1") is False
        assert await storage.has_item("key0") is True
        assert await storage.has_item("key10") is True

    async def test_namespace_isolation(self) -> None:
        storage1 = MemoryStorage(namespace="ns1")
        storage2 = MemoryStorage(namespace="ns2")

        await storage1.set_item("key1", "value1")
        await storage2.set_item("key1", "value2")

        assert await storage1.get_items(["key1"]) == {"key1": "value1"}
        assert await storage2.get_items(["key1"]) == {"key1": "value2"}

    async def test_clear_by_namespace(self, storage: MemoryStorage) -> None:
        """Only entries of the given namespace are removed."""
        await storage.set_item("key1", "in test")
        storage.get_options().namespace = "other"
        await storage.set_item("key1", "in other")

        assert await storage.clear_by_namespace("test") is True
        assert await storage.get_items(["key1"]) == {"key1": "in other"}

        storage.get_options().namespace = "test"
        assert await storage.get_items(["key1"]) == {}

    async def test_flush(self, storage: MemoryStorage) -> None:
        await storage.set_item("key1", "value1")
        storage.get_options().namespace = "other"
        await storage.set_item("key1", "value1")

        assert await storage.flush() is True
        stats = await storage.get_stats()
        assert stats["size"] == 0

    async def test_empty_namespace_uses_bare_keys(self) -> None:
        storage = MemoryStorage(namespace="")
        await storage.set_item("key1", "value1")
        assert await storage.get_items(["key1"]) == {"key1": "value1"}

    @pytest.mark.parametrize("key", ["", None, 3])
    async def test_invalid_key_raises_validation_error(self, storage: MemoryStorage, key: object) -> None:
        with pytest.raises(BackendValidationError):
            await storage.set_item(key, "value")  # type: ignore[arg-type]
        with pytest.raises(BackendValidationError):
            await storage.get_items([key])  # type: ignore[list-item]

    async def test_clear_by_empty_namespace_raises(self, storage: MemoryStorage) -> None:
        with pytest.raises(BackendValidationError):
            await storage.clear_by_namespace("")

    async def test_errors_reach_callbacks(self, storage: MemoryStorage) -> None:
        seen = []
        storage.add_exception_callback(seen.append)

        with pytest.raises(BackendValidationError) as exc_info:
            await storage.has_item("")

        assert seen == [exc_info.value]
