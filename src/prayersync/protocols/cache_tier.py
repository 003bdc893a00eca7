"""Cache tier protocol.

One layer of the prayer-time cache. Tiers are composed in order by
TieredTimeCache, which consults each one only when the previous missed.
"""

from typing import Protocol, runtime_checkable

from prayersync.entities import CacheEntry, CacheKey


@runtime_checkable
class CacheTier(Protocol):
    """Protocol for cache tiers: get, set, invalidate."""

    @property
    def name(self) -> str:
        """Short tier name used in logs ("volatile", "durable", "upstream")."""
        ...

    async def get(self, key: CacheKey) -> CacheEntry | None:
        """Look up an entry.

        Returns the entry even if expired; freshness is judged by the caller.

        Args:
            key: The cache key

        Returns:
            The entry, or None on a miss
        """
        ...

    async def set(self, key: CacheKey, entry: CacheEntry) -> None:
        """Store an entry. Tiers that cannot store (upstream) ignore this."""
        ...

    async def invalidate(self, key: CacheKey) -> None:
        """Remove an entry."""
        ...
