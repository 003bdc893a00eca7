"""Resolution of a coordinate's IANA timezone.

Zone identifiers are permanent facts about a location, so they are looked up
once and kept for the lifetime of the durable cache.
"""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

from prayersync.config import Settings, settings
from prayersync.entities import CacheEntry, Coordinate, metadata_key
from prayersync.errors import DurableStoreError
from prayersync.methods import CalculationMethod
from prayersync.protocols import KeyValueStore, TimingsProvider
from prayersync.repositories import EntryDecodeError, decode_entry, encode_entry

logger = logging.getLogger(__name__)


class TimezoneResolver:
    """Maps a coordinate to its IANA zone, with an in-process memo in front
    of the durable store.

    The memo alone guarantees a single network lookup per coordinate for
    the life of the process, even when durable writes fail.
    """

    def __init__(
        self,
        provider: TimingsProvider,
        store: KeyValueStore,
        default_method: CalculationMethod = CalculationMethod.MWL,
        precision: int = 4,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._provider = provider
        self._store = store
        self._default_method = default_method
        self._precision = precision
        self._clock = clock
        self._memo: dict[str, str] = {}

    @classmethod
    def create(
        cls,
        provider: TimingsProvider,
        store: KeyValueStore,
        config: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> "TimezoneResolver":
        """Factory method to create TimezoneResolver from settings."""
        config = config or settings
        return cls(
            provider=provider,
            store=store,
            default_method=CalculationMethod(config.default_method),
            precision=config.coordinate_precision,
            clock=clock,
        )

    async def resolve(self, coordinate: Coordinate) -> str:
        """Return the coordinate's zone identifier.

        Raises:
            UpstreamUnavailable: No cached zone and the lookup failed
            MetadataMissing: The lookup succeeded but carried no zone
        """
        key = metadata_key(coordinate, self._precision)
        if key in self._memo:
            return self._memo[key]

        cached = await self._read_durable(key)
        if cached is not None:
            self._memo[key] = cached
            return cached

        today = datetime.fromtimestamp(self._clock(), tz=timezone.utc).date()
        logger.info(f"Resolving timezone for {coordinate.label()}")
        payload = await self._provider.fetch_timings(today, coordinate, self._default_method)

        await self._store_zone(key, payload.timezone)
        return payload.timezone

    async def remember(self, coordinate: Coordinate, zone: str) -> None:
        """Record a zone learned as a by-product of a timings fetch."""
        key = metadata_key(coordinate, self._precision)
        if self._memo.get(key) == zone:
            return
        await self._store_zone(key, zone)

    async def evict(self, coordinate: Coordinate) -> None:
        """Forget a coordinate's zone so the next resolve looks it up again."""
        key = metadata_key(coordinate, self._precision)
        self._memo.pop(key, None)
        await self._store.delete(key)

    async def _read_durable(self, key: str) -> str | None:
        try:
            raw = await self._store.get(key)
        except DurableStoreError as e:
            logger.warning(f"Timezone cache read failed for {key}: {e}")
            return None
        if raw is None:
            return None

        try:
            entry = decode_entry(raw)
        except EntryDecodeError as e:
            logger.warning(f"Ignoring corrupt timezone entry {key}: {e}")
            return None
        if not isinstance(entry.value, str):
            logger.warning(f"Ignoring timezone entry {key}: not a zone id")
            return None
        return entry.value

    async def _store_zone(self, key: str, zone: str) -> None:
        self._memo[key] = zone
        entry = CacheEntry(value=zone, created_at=self._clock())
        if not await self._store.set(key, encode_entry(entry)):
            logger.warning(f"Timezone cache write failed for {key}; kept in memory only")
