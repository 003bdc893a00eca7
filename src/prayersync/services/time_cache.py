"""Tiered prayer-time cache.

Lookups walk an ordered list of tiers (volatile, durable, upstream) and stop
at the first fresh hit. Every tier that missed on the way is back-filled with
the hit, so a durable hit rehydrates the volatile tier and an upstream fetch
writes through to both.

Expired entries are not thrown away: if the upstream tier then fails, the
most recent of them is served as last-known-good data.
"""

import logging
import time
from collections.abc import Callable, Sequence
from datetime import date, datetime, timezone

from prayersync.config import Settings, settings
from prayersync.entities import CacheEntry, CacheKey, Coordinate, PrayerTimeSet
from prayersync.errors import AllTiersExhausted, InvalidUpstreamPayload, UnknownTimezone, UpstreamUnavailable
from prayersync.methods import AsrSchool, CalculationMethod, resolve_method, resolve_school
from prayersync.protocols import CacheTier, KeyValueStore, TimingsProvider
from prayersync.repositories import (
    AladhanTimingsProvider,
    DurableTier,
    UpstreamTier,
    VolatileTier,
    create_durable_store,
)
from prayersync.services.timezone_resolver import TimezoneResolver
from prayersync.services.utc_converter import local_civil_date

logger = logging.getLogger(__name__)


class TieredTimeCache:
    """Prayer times for (coordinate, civil date, method), cached in tiers.

    This service depends on the CacheTier protocol, so tiers can be swapped
    or reordered without changing the lookup logic.

    Example:
        ```python
        cache = TieredTimeCache.create()
        times = await cache.get_prayer_times(Coordinate(51.5074, -0.1278))
        print(times.get(PrayerName.FAJR))
        ```
    """

    def __init__(
        self,
        tiers: Sequence[CacheTier],
        resolver: TimezoneResolver,
        ttl: float | None = None,
        default_method: CalculationMethod | None = None,
        default_school: AsrSchool | None = None,
        precision: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache.

        Args:
            tiers: Tiers in lookup order, upstream last.
            resolver: Maps coordinates to their IANA zone.
            ttl: Time-data TTL in seconds, must be positive. Defaults to settings.time_data_ttl.
            default_method: Method used when a caller passes None. Defaults to settings.
            default_school: Asr school used when a caller passes None. Defaults to settings.
            precision: Coordinate rounding for keys. Defaults to settings.
            clock: Returns the current unix time.
        """
        if not tiers:
            raise ValueError("TieredTimeCache needs at least one tier")
        self._tiers = list(tiers)
        self._resolver = resolver
        self._ttl = settings.time_data_ttl if ttl is None else ttl
        if self._ttl <= 0:
            raise ValueError(f"ttl must be positive, got {self._ttl}")
        self._default_method = resolve_method(default_method, settings.default_method)
        self._default_school = resolve_school(default_school, settings.default_school)
        self._precision = settings.coordinate_precision if precision is None else precision
        self._clock = clock

    @classmethod
    def create(
        cls,
        provider: TimingsProvider | None = None,
        store: KeyValueStore | None = None,
        config: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> "TieredTimeCache":
        """Factory method wiring volatile, durable and upstream tiers.

        Zones that arrive with any timings response are handed to the
        resolver, so a location fetched once never needs a separate
        metadata lookup.

        Args:
            provider: Timings provider. If None, uses AlAdhan from settings.
            store: Durable byte-store. If None, uses settings.durable_backend.
            config: Settings to read from. If None, uses global settings.
            clock: Returns the current unix time.

        Returns:
            Configured TieredTimeCache
        """
        config = config or settings
        provider = provider or AladhanTimingsProvider.create(config)
        store = store or create_durable_store(config)

        resolver = TimezoneResolver.create(provider, store, config=config, clock=clock)

        async def remember_zone(key: CacheKey, zone: str) -> None:
            await resolver.remember(key.coordinate, zone)

        tiers = [
            VolatileTier(),
            DurableTier(store),
            UpstreamTier(provider, clock=clock, on_timezone=remember_zone),
        ]
        return cls(
            tiers=tiers,
            resolver=resolver,
            ttl=config.time_data_ttl,
            default_method=CalculationMethod(config.default_method),
            default_school=AsrSchool(config.default_school),
            precision=config.coordinate_precision,
            clock=clock,
        )

    @property
    def resolver(self) -> TimezoneResolver:
        return self._resolver

    @property
    def tiers(self) -> list[CacheTier]:
        return list(self._tiers)

    @property
    def default_method(self) -> CalculationMethod:
        return self._default_method

    @property
    def default_school(self) -> AsrSchool:
        return self._default_school

    def key_for(
        self,
        coordinate: Coordinate,
        civil_date: date,
        method: CalculationMethod | int | str | None = None,
        school: AsrSchool | int | str | None = None,
    ) -> CacheKey:
        return CacheKey(
            coordinate=coordinate,
            civil_date=civil_date,
            method=resolve_method(method, self._default_method),
            school=resolve_school(school, self._default_school),
            precision=self._precision,
        )

    async def lookup(
        self,
        coordinate: Coordinate,
        civil_date: date,
        method: CalculationMethod | int | str | None = None,
        school: AsrSchool | int | str | None = None,
    ) -> PrayerTimeSet:
        """Find prayer times, consulting each tier only if the previous missed.

        Business logic:
        1. Ask each tier in order
        2. On a fresh hit, back-fill every earlier tier and return
        3. Remember expired entries seen on the way
        4. If nothing fresh was found, serve the newest expired entry

        Args:
            coordinate: Location
            civil_date: Date in the location's calendar
            method: Calculation method. None uses the default.
            school: Asr juristic school. None uses the default.

        Returns:
            The prayer times

        Raises:
            AllTiersExhausted: Upstream failed and no tier held stale data
        """
        key = self.key_for(coordinate, civil_date, method, school)
        now = self._clock()
        missed: list[CacheTier] = []
        stale: CacheEntry | None = None

        for tier in self._tiers:
            try:
                entry = await tier.get(key)
            except InvalidUpstreamPayload as e:
                logger.error(f"{tier.name} tier returned an unusable payload for {key}: {e}")
                continue
            except UpstreamUnavailable as e:
                logger.warning(f"{tier.name} tier unavailable for {key}: {e}")
                continue

            if entry is None:
                missed.append(tier)
                continue

            if entry.is_fresh(self._ttl, now):
                logger.info(f"{tier.name} tier hit for {key}")
                for earlier in missed:
                    await earlier.set(key, entry)
                return entry.times

            logger.debug(f"{tier.name} tier holds an expired entry for {key}")
            if stale is None or entry.created_at > stale.created_at:
                stale = entry
            missed.append(tier)

        if stale is not None:
            age = int(now - stale.created_at)
            logger.warning(f"Serving last known prayer times for {key} ({age}s old)")
            return stale.times

        raise AllTiersExhausted(str(key))

    async def get_prayer_times_for_date(
        self,
        coordinate: Coordinate,
        civil_date: date,
        method: CalculationMethod | int | str | None = None,
        school: AsrSchool | int | str | None = None,
    ) -> PrayerTimeSet:
        """Like lookup(), but returns the static fallback set instead of raising."""
        try:
            return await self.lookup(coordinate, civil_date, method, school)
        except AllTiersExhausted as e:
            logger.warning(f"Using fallback prayer times: {e}")
            return PrayerTimeSet.fallback()

    async def get_prayer_times(
        self,
        coordinate: Coordinate,
        instant: datetime | None = None,
        method: CalculationMethod | int | str | None = None,
        school: AsrSchool | int | str | None = None,
    ) -> PrayerTimeSet:
        """Prayer times for the day an observer at the coordinate sees at instant.

        Args:
            coordinate: Location
            instant: Moment of interest. None means now; naive values are UTC.
            method: Calculation method. None uses the default.
            school: Asr juristic school. None uses the default.

        Returns:
            The prayer times, or the static fallback set when offline
        """
        instant = instant or datetime.fromtimestamp(self._clock(), tz=timezone.utc)
        try:
            zone = await self._resolver.resolve(coordinate)
            civil_date = local_civil_date(instant, zone)
        except (UpstreamUnavailable, UnknownTimezone) as e:
            logger.warning(f"Cannot determine local date for {coordinate.label()}, using fallback: {e}")
            return PrayerTimeSet.fallback()

        return await self.get_prayer_times_for_date(coordinate, civil_date, method, school)

    async def invalidate(
        self,
        coordinate: Coordinate,
        civil_date: date,
        method: CalculationMethod | int | str | None = None,
        school: AsrSchool | int | str | None = None,
    ) -> None:
        """Remove one day's entry from every tier."""
        key = self.key_for(coordinate, civil_date, method, school)
        for tier in self._tiers:
            await tier.invalidate(key)
        logger.info(f"Invalidated {key}")
