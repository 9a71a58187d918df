"""
itempool - Redis Storage Backend

Asynchronous Redis storage implementation with:
- JSON serialization for values
- TTL from ``options.ttl`` applied via SET ... EX
- Namespace prefixing, clearable per namespace with SCAN + DEL
- Batch reads with MGET and batch deletes with a pipeline

Requires: redis>=5.0 with asyncio support

Example:
    storage = RedisStorage(redis_url="redis://localhost:6379", namespace="itempool", default_ttl=3600)
    await storage.set_item("greeting", {"msg": "hello"})
    found = await storage.get_items(["greeting"])
"""

from __future__ import annotations

import json
import logging
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

try:
    from redis.asyncio import Redis
    from redis.exceptions import RedisError
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis async client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e


class RedisStorage(StorageInterface, FlushableInterface, ClearByNamespaceInterface):
    """
    Redis storage backend with JSON serialization and TTL.

    Notes:
    - Keys are prefixed with ``options.namespace`` (no prefix when empty).
    - Values are stored as UTF-8 JSON strings.
    - ``options.ttl`` of 0 stores without expiry.
    - ``flush`` runs FLUSHDB and drops every key in the selected database.
    """

    CAPABILITIES = Capabilities(static_ttl=True, min_ttl=1, max_ttl=0, namespace_separator=":")

    def __init__(
        self,
        redis_url: str,
        namespace: str = "itempool",
        default_ttl: int = 3600,
        max_connections: int = 10,
        socket_timeout: int = 5,
        client: Redis | None = None,
    ) -> None:
        """
        Initialize Redis storage backend.

        Args:
            redis_url: Connection URL, e.g., redis://localhost:6379/0 or rediss:// for TLS
            namespace: Prefix for all keys
            default_ttl: Default TTL in seconds (0 => no expiry)
            max_connections: Connection pool size
            socket_timeout: Socket timeout in seconds
            client: Pre-built client to use instead of connecting to ``redis_url``
        """
        if not redis_url and client is None:
            raise ValueError("redis_url is required")

        super().__init__(StorageOptions(ttl=max(0, int(default_ttl)), namespace=namespace.strip()))

        # Lazy connection; connects on first command
        self._client = client or Redis.from_url(  # type: ignore[call-overload]
            url=redis_url,
            decode_responses=True,
            max_connections=max_connections,
            socket_timeout=socket_timeout,
        )

    def get_capabilities(self) -> Capabilities:
        return self.CAPABILITIES

    # ------------ Helpers ------------

    def _fail(self, error: BackendError) -> BackendError:
        return self._notify_exception(error)

    def _runtime_error(self, operation: str, error: Exception, **details: Any) -> BackendError:
        logger.debug(
            f"Redis {operation} failed: {error}",
            extra={"operation": operation, "namespace": self._options.namespace, "error": str(error), **details},
        )
        return self._fail(
            BackendRuntimeError(
                f"Redis {operation} failed: {error}",
                details={"operation": operation, **details},
                backend="redis",
            )
        )

    def _make_key(self, key: str) -> str:
        """Create namespaced key."""
        if not isinstance(key, str) or not key:
            raise self._fail(
                BackendValidationError(
                    f"Storage key must be a non-empty string; {key!r} given",
                    details={"key": repr(key)},
                    backend="redis",
                )
            )
        namespace = self._options.namespace
        if not namespace:
            return key
        return f"{namespace}{self.CAPABILITIES.namespace_separator}{key}"

    @staticmethod
    def _to_json(value: Any) -> str:
        """Serialize value to JSON string."""
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))

    @staticmethod
    def _from_json(data: str | bytes) -> Any:
        """Deserialize JSON string to Python object."""
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        try:
            return json.loads(data)
        except ValueError as e:
            # Not written by us; hand back the raw string
            logger.warning(
                f"Failed to decode JSON from storage, returning raw data: {e}",
                extra={"data_preview": data[:100], "error": str(e)},
            )
            return data

    # ------------ Core Interface ------------

    async def get_items(self, keys: list[str]) -> dict[str, Any]:
        """
        Retrieve multiple values in one round-trip using MGET.
        Missing keys are omitted from the result.
        """
        if not keys:
            return {}

        ns_keys = [self._make_key(k) for k in keys]
        try:
            values = await self._client.mget(ns_keys)
        except RedisError as e:
            raise self._runtime_error("get_items", e, key_count=len(keys)) from e

        result: dict[str, Any] = {}
        # mget preserves order
        for key, raw in zip(keys, values, strict=True):
            if raw is not None:
                result[key] = self._from_json(raw)

        return result

    async def has_item(self, key: str) -> bool:
        """Check if a key exists."""
        ns_key = self._make_key(key)
        try:
            return bool(await self._client.exists(ns_key))
        except RedisError as e:
            raise self._runtime_error("has_item", e, key=key) from e

    async def set_item(self, key: str, value: Any) -> bool:
        """Store a value with the TTL currently set in options."""
        ns_key = self._make_key(key)
        ttl = self._options.ttl

        try:
            payload = self._to_json(value)
        except (TypeError, ValueError) as e:
            raise self._runtime_error("serialize", e, key=key, value_type=type(value).__name__) from e

        try:
            # redis-py returns True or 'OK' depending on decode_responses
            res = await self._client.set(name=ns_key, value=payload, ex=ttl if ttl > 0 else None)
        except RedisError as e:
            raise self._runtime_error("set_item", e, key=key, ttl=ttl) from e

        return bool(res)

    async def remove_items(self, keys: list[str]) -> list[str]:
        """
        Delete keys using a pipeline.
        Returns keys that did not exist.
        """
        if not keys:
            return []

        ns_keys = [self._make_key(k) for k in keys]
        try:
            pipe = self._client.pipeline(transaction=False)
            for ns_key in ns_keys:
                pipe.delete(ns_key)
            results = await pipe.execute()
        except RedisError as e:
            raise self._runtime_error("remove_items", e, key_count=len(keys)) from e

        return [key for key, deleted in zip(keys, results, strict=True) if not deleted]

    async def flush(self) -> bool:
        """Drop every key in the current Redis database."""
        try:
            result = await self._client.flushdb()
        except RedisError as e:
            raise self._runtime_error("flush", e) from e

        logger.info("Flushed Redis database")
        return bool(result)

    async def clear_by_namespace(self, namespace: str) -> bool:
        """
        Clear all entries under ``namespace``.

        Implementation: SCAN match "<namespace>:*" and DEL in batches.
        """
        if not namespace:
            raise self._fail(BackendValidationError("No namespace given", backend="redis"))

        pattern = f"{namespace}{self.CAPABILITIES.namespace_separator}*"
        cursor = 0
        total_deleted = 0
        batch_size = 1000

        try:
            while True:
                cursor, keys = await self._client.scan(cursor=cursor, match=pattern, count=batch_size)
                if keys:
                    total_deleted += await self._client.delete(*keys)
                if cursor == 0:
                    break
        except RedisError as e:
            raise self._runtime_error("clear_by_namespace", e, cleared_namespace=namespace) from e

        logger.info(f"Cleared {total_deleted} keys from namespace '{namespace}'")
        return True

    async def close(self) -> None:
        """Close the Redis client and release resources."""
        try:
            await self._client.aclose()
            logger.info(f"Closed Redis storage for namespace '{self._options.namespace}'")
        except RedisError as e:
            logger.error(
                f"Error closing Redis client: {e}",
                extra={"namespace": self._options.namespace, "error": str(e)},
                exc_info=True,
            )
