"""Redis implementation of KeyValueStore.

Keeps serialized cache entries as plain Redis strings under a common key
prefix. Expiry is judged from the timestamp inside each entry, not by Redis,
so that expired entries remain available as "last known good" data.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from prayersync.config import Settings, get_redis_client, settings
from prayersync.errors import DurableStoreError

logger = logging.getLogger(__name__)


class RedisKeyValueStore:
    """Redis implementation of the KeyValueStore protocol.

    This class satisfies the KeyValueStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis store.

        Args:
            redis_client: Async Redis client instance. If None, creates default.
            key_prefix: Namespace prepended to every key.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = key_prefix or settings.cache_key_prefix

    @classmethod
    def create(cls, config: Settings | None = None) -> "RedisKeyValueStore":
        """Factory method to create RedisKeyValueStore from settings.

        Args:
            config: Settings to read from. If None, uses global settings.

        Returns:
            Configured RedisKeyValueStore
        """
        config = config or settings
        return cls(redis_client=get_redis_client(config), key_prefix=config.cache_key_prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    async def get(self, key: str) -> bytes | None:
        """Read a value.

        Args:
            key: The storage key

        Returns:
            The stored bytes, or None if absent

        Raises:
            DurableStoreError: If Redis cannot be reached
        """
        try:
            value = await self._client.get(self._key(key))
        except RedisError as e:
            raise DurableStoreError(f"Redis read failed for {key}: {e}") from e

        if value is None:
            return None
        return value if isinstance(value, bytes) else str(value).encode()

    async def set(self, key: str, value: bytes) -> bool:
        """Write a value.

        Args:
            key: The storage key
            value: Bytes to store

        Returns:
            True on success, False on failure
        """
        try:
            return bool(await self._client.set(self._key(key), value))
        except RedisError as e:
            logger.warning(f"Redis write failed for {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        """Remove a value.

        Args:
            key: The storage key

        Returns:
            True if deleted, False otherwise
        """
        try:
            result: int = await self._client.delete(self._key(key))
        except RedisError as e:
            logger.warning(f"Redis delete failed for {key}: {e}")
            return False
        return result > 0

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False

    async def close(self) -> None:
        """Close the Redis connection pool."""
        await self._client.aclose()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
