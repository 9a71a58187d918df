"""
itempool - Storage Interface

Defines the abstract interface that all storage backends must implement,
plus the optional capability interfaces the item pool probes for.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..errors import BackendError

logger = logging.getLogger(__name__)

ExceptionCallback = Callable[[BackendError], None]


class StorageOptions(BaseModel):
    """
    Mutable runtime options of a storage backend.

    ``ttl`` is read at write time, so changing it affects every subsequent
    ``set_item`` call on the same storage.
    """

    ttl: int = Field(default=0, ge=0, description="TTL in seconds applied on write (0 = no expiry)")
    namespace: str = Field(default="", description="Key namespace")

    model_config = ConfigDict(validate_assignment=True)


class Capabilities(BaseModel):
    """What a storage backend supports."""

    static_ttl: bool = Field(default=False, description="TTL is fixed at write time")
    min_ttl: int = Field(default=0, ge=0, description="Smallest supported TTL in seconds (0 = TTL unsupported)")
    max_ttl: int = Field(default=0, ge=0, description="Largest supported TTL in seconds (0 = unlimited)")
    namespace_separator: str = Field(default=":", description="Separator between namespace and key")

    model_config = ConfigDict(frozen=True)


class StorageInterface(ABC):
    """
    Abstract base class for storage backends.

    Implementations raise only BackendValidationError or BackendRuntimeError,
    and pass every such error to ``_notify_exception`` before raising it.
    """

    def __init__(self, options: StorageOptions | None = None):
        self._options = options or StorageOptions()
        self._exception_callbacks: list[ExceptionCallback] = []

        # Guards writes that temporarily change options.ttl
        self.ttl_lock = asyncio.Lock()

    def get_options(self) -> StorageOptions:
        """Return the live options object (not a copy)."""
        return self._options

    @abstractmethod
    def get_capabilities(self) -> Capabilities:
        """Describe what this backend supports."""
        pass

    @abstractmethod
    async def get_items(self, keys: list[str]) -> dict[str, Any]:
        """
        Retrieve multiple values.

        Args:
            keys: Keys to look up

        Returns:
            Mapping of found keys to values (missing keys are omitted)
        """
        pass

    @abstractmethod
    async def has_item(self, key: str) -> bool:
        """Check whether a key exists and is not expired."""
        pass

    @abstractmethod
    async def set_item(self, key: str, value: Any) -> bool:
        """
        Store a value using the current ``options.ttl``.

        Returns:
            True if stored successfully
        """
        pass

    @abstractmethod
    async def remove_items(self, keys: list[str]) -> list[str]:
        """
        Remove multiple keys.

        Returns:
            Keys that were not removed (because they did not exist)
        """
        pass

    async def close(self) -> None:
        """Release backend resources. The default does nothing."""
        logger.debug(f"Storage {type(self).__name__} closed")

    # ------------ Exception callbacks ------------

    def add_exception_callback(self, callback: ExceptionCallback) -> None:
        """Register a callback invoked with every backend error before it is raised."""
        if callback not in self._exception_callbacks:
            self._exception_callbacks.append(callback)

    def remove_exception_callback(self, callback: ExceptionCallback) -> None:
        """Unregister a previously added callback. Unknown callbacks are ignored."""
        if callback in self._exception_callbacks:
            self._exception_callbacks.remove(callback)

    @property
    def exception_callbacks(self) -> tuple[ExceptionCallback, ...]:
        return tuple(self._exception_callbacks)

    def _notify_exception(self, error: BackendError) -> BackendError:
        """
        Pass ``error`` to every registered callback and return it for raising.

        A failing callback is logged and skipped so the original error still
        propagates.
        """
        for callback in list(self._exception_callbacks):
            try:
                callback(error)
            except Exception as e:
                logger.warning(
                    f"Storage exception callback failed: {e}",
                    extra={"callback": repr(callback), "error": str(e)},
                    exc_info=True,
                )
        return error


class FlushableInterface(ABC):
    """Storage that can drop all of its entries."""

    @abstractmethod
    async def flush(self) -> bool:
        """
        Remove every entry from the storage.

        Returns:
            True if the storage was flushed
        """
        pass


class ClearByNamespaceInterface(ABC):
    """Storage that can drop only the entries of one namespace."""

    @abstractmethod
    async def clear_by_namespace(self, namespace: str) -> bool:
        """
        Remove every entry stored under ``namespace``.

        Returns:
            True if the namespace was cleared
        """
        pass
