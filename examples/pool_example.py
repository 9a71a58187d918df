"""
Cache Item Pool Usage Example

Demonstrates how to use the cache item pool over a storage backend.

This example shows:
- Creating a pool from configuration
- Reading, saving and deleting items
- Per-item expiration
- Deferred saves and commit
- Clearing the pool's namespace
"""

import asyncio
import logging
from datetime import timedelta

from itempool.cache import create_pool
from itempool.config import StorageBackend, StorageConfig
from itempool.storage import close_all_storages

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


async def example_basic_usage() -> None:
    """Example: read-through caching."""
    logger.info("=" * 60)
    logger.info("Example 1: Basic Usage")
    logger.info("=" * 60)

    config = StorageConfig(backend=StorageBackend.MEMORY, namespace="example", ttl_seconds=600)

    async with create_pool(config, name="basic") as pool:
        item = await pool.get_item("user_42")
        if not item.is_hit():
            logger.info("Miss for %s, computing value", item.get_key())
            item.set({"name": "Ada", "visits": 1})
            await pool.save(item)

        item = await pool.get_item("user_42")
        logger.info("Hit: %s, value: %s", item.is_hit(), item.get())

        await pool.delete_item("user_42")
        logger.info("After delete, has_item: %s", await pool.has_item("user_42"))


async def example_expiration() -> None:
    """Example: per-item expiration overrides the storage default TTL."""
    logger.info("=" * 60)
    logger.info("Example 2: Expiration")
    logger.info("=" * 60)

    config = StorageConfig(backend=StorageBackend.MEMORY, namespace="expiring")

    async with create_pool(config, name="expiring") as pool:
        item = (await pool.get_item("token")).set("abc").expires_after(timedelta(seconds=1))
        await pool.save(item)
        logger.info("Saved token, storage default TTL still %ds", pool.storage.get_options().ttl)

        await asyncio.sleep(1.5)
        logger.info("Token hit after expiry: %s", (await pool.get_item("token")).is_hit())


async def example_deferred() -> None:
    """Example: buffer saves and write them in one commit."""
    logger.info("=" * 60)
    logger.info("Example 3: Deferred Saves")
    logger.info("=" * 60)

    config = StorageConfig(backend=StorageBackend.MEMORY, namespace="deferred")

    async with create_pool(config, name="deferred") as pool:
        for i in range(3):
            await pool.save_deferred((await pool.get_item(f"row{i}")).set(i * 10))

        # Deferred items are visible before commit
        items = await pool.get_items(["row0", "row1", "row2"])
        logger.info("Buffered: %s", {key: item.get() for key, item in items.items()})

        logger.info("Commit succeeded: %s", await pool.commit())
        logger.info("Cleared: %s", await pool.clear())


async def main() -> None:
    """Run all examples."""
    try:
        await example_basic_usage()
        await example_expiration()
        await example_deferred()
    finally:
        await close_all_storages()


if __name__ == "__main__":
    asyncio.run(main())
