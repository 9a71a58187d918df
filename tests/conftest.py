"""
itempool - Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
from collections.abc import Callable, Generator
from typing import Any

import pytest

from itempool.cache.pool import CacheItemPool
from itempool.errors import BackendError
from itempool.storage.interface import (
    Capabilities,
    ClearByNamespaceInterface,
    FlushableInterface,
    StorageInterface,
    StorageOptions,
)

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"


class RecordingStorage(StorageInterface, FlushableInterface):
    """
    Dict-backed storage that records calls and can be told to fail.

    ``errors`` maps a method name to the BackendError that method raises.
    ``ttl_on_write`` records ``options.ttl`` as seen by each set_item call.
    """

    def __init__(
        self,
        capabilities: Capabilities | None = None,
        ttl: int = 0,
        namespace: str = "",
    ):
        super().__init__(StorageOptions(ttl=ttl, namespace=namespace))
        self.capabilities = capabilities or Capabilities(static_ttl=True, min_ttl=1)
        self.data: dict[str, Any] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.errors: dict[str, BackendError] = {}
        self.ttl_on_write: list[int] = []
        self.set_result = True

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        error = self.errors.get(method)
        if error is not None:
            raise self._notify_exception(error)

    def called(self, method: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]

    def get_capabilities(self) -> Capabilities:
        return self.capabilities

    async def get_items(self, keys: list[str]) -> dict[str, Any]:
        self._record("get_items", list(keys))
        return {key: self.data[key] for key in keys if key in self.data}

    async def has_item(self, key: str) -> bool:
        self._record("has_item", key)
        return key in self.data

    async def set_item(self, key: str, value: Any) -> bool:
        self.ttl_on_write.append(self._options.ttl)
        self._record("set_item", key, value)
        if self.set_result:
            self.data[key] = value
        return self.set_result

    async def remove_items(self, keys: list[str]) -> list[str]:
        self._record("remove_items", list(keys))
        return [key for key in keys if self.data.pop(key, None) is None]

    async def flush(self) -> bool:
        self._record("flush")
        self.data.clear()
        return True


class NamespacedRecordingStorage(RecordingStorage, ClearByNamespaceInterface):
    """RecordingStorage that can also clear by namespace."""

    async def clear_by_namespace(self, namespace: str) -> bool:
        self._record("clear_by_namespace", namespace)
        self.data.clear()
        return True


class UnflushableStorage(StorageInterface):
    """Storage without the flush capability."""

    def get_capabilities(self) -> Capabilities:
        return Capabilities(static_ttl=True, min_ttl=1)

    async def get_items(self, keys: list[str]) -> dict[str, Any]:
        return {}

    async def has_item(self, key: str) -> bool:
        return False

    async def set_item(self, key: str, value: Any) -> bool:
        return True

    async def remove_items(self, keys: list[str]) -> list[str]:
        return list(keys)


@pytest.fixture
def make_storage() -> Callable[..., RecordingStorage]:
    """Factory for recording storages; ``namespaced=True`` adds clear_by_namespace."""

    def _make(namespaced: bool = False, **kwargs: Any) -> RecordingStorage:
        cls = NamespacedRecordingStorage if namespaced else RecordingStorage
        return cls(**kwargs)

    return _make


@pytest.fixture
def unflushable_storage() -> StorageInterface:
    return UnflushableStorage()


@pytest.fixture
def storage(make_storage: Callable[..., RecordingStorage]) -> RecordingStorage:
    """A fresh recording storage."""
    return make_storage()


@pytest.fixture
def pool(storage: RecordingStorage) -> CacheItemPool:
    """A pool over the recording storage."""
    return CacheItemPool(storage)


@pytest.fixture
def test_redis_url() -> str:
    """Get Redis URL for testing (database 15 for isolation)."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
def mock_env_memory(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set environment variables for memory storage backend."""
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("STORAGE_MAX_SIZE", "100")
    monkeypatch.setenv("STORAGE_TTL_SECONDS", "3600")
    monkeypatch.setenv("STORAGE_NAMESPACE", "test")


@pytest.fixture(autouse=True)
def reset_factories() -> Generator[None, None, None]:
    """Reset storage factory and loaded config after each test to prevent state leakage."""
    yield
    from itempool.config import reset_config
    from itempool.storage.factory import reset_storage_factory

    reset_storage_factory()
    reset_config()
