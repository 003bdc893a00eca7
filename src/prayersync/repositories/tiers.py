"""Concrete cache tiers: volatile, durable and upstream.

Each class satisfies the CacheTier protocol. Tiers return entries without
judging freshness; TieredTimeCache applies the TTL so it can keep expired
entries as last-known-good data.
"""

import logging
import time
from collections.abc import Awaitable, Callable

from prayersync.entities import CacheEntry, CacheKey, PrayerTimeSet
from prayersync.errors import DurableStoreError
from prayersync.protocols import KeyValueStore, TimingsProvider
from prayersync.repositories.entry_codec import EntryDecodeError, decode_entry, encode_entry

logger = logging.getLogger(__name__)


class VolatileTier:
    """Process-local tier.

    One instance is created per process and owned by whoever builds the
    TieredTimeCache. It is never re-initialised implicitly; call clear() to
    drop everything.
    """

    name = "volatile"

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    async def get(self, key: CacheKey) -> CacheEntry | None:
        return self._entries.get(str(key))

    async def set(self, key: CacheKey, entry: CacheEntry) -> None:
        self._entries[str(key)] = entry

    async def invalidate(self, key: CacheKey) -> None:
        self._entries.pop(str(key), None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class DurableTier:
    """Cross-session tier on top of a KeyValueStore.

    Reads that fail or return corrupt bytes are misses. Writes are
    best-effort: a failure is logged and never reaches the caller.
    """

    name = "durable"

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        return self._store

    async def get(self, key: CacheKey) -> CacheEntry | None:
        try:
            raw = await self._store.get(str(key))
        except DurableStoreError as e:
            logger.warning(f"Durable cache read failed, treating as miss: {e}")
            return None

        if raw is None:
            return None

        try:
            entry = decode_entry(raw)
        except EntryDecodeError as e:
            logger.warning(f"Ignoring corrupt durable entry {key}: {e}")
            return None

        if not isinstance(entry.value, PrayerTimeSet):
            logger.warning(f"Ignoring durable entry {key}: not prayer times")
            return None
        return entry

    async def set(self, key: CacheKey, entry: CacheEntry) -> None:
        if not await self._store.set(str(key), encode_entry(entry)):
            logger.warning(f"Durable cache write failed for {key}; continuing without it")

    async def invalidate(self, key: CacheKey) -> None:
        await self._store.delete(str(key))


class UpstreamTier:
    """Network tier: every get() is a provider fetch.

    Provider errors propagate so TieredTimeCache can tell a miss from a
    failure. Zones learned from a fetch are handed to on_timezone.
    """

    name = "upstream"

    def __init__(
        self,
        provider: TimingsProvider,
        clock: Callable[[], float] = time.time,
        on_timezone: Callable[[CacheKey, str], Awaitable[None]] | None = None,
    ) -> None:
        self._provider = provider
        self._clock = clock
        self._on_timezone = on_timezone

    async def get(self, key: CacheKey) -> CacheEntry | None:
        payload = await self._provider.fetch_timings(key.civil_date, key.coordinate, key.method, key.school)
        times = PrayerTimeSet.from_timings(payload.timings)
        if self._on_timezone is not None:
            await self._on_timezone(key, payload.timezone)
        return CacheEntry(value=times, created_at=self._clock())

    async def set(self, key: CacheKey, entry: CacheEntry) -> None:
        return None

    async def invalidate(self, key: CacheKey) -> None:
        return None
