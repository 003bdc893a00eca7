"""
Tests for the tiered prayer-time cache.
"""

from datetime import date, datetime, timezone

import pytest

from prayersync.entities import CacheEntry, CacheKey, Coordinate, PrayerName, PrayerTimeSet
from prayersync.errors import AllTiersExhausted, InvalidUpstreamPayload
from prayersync.config import Settings
from prayersync.methods import AsrSchool, CalculationMethod
from prayersync.repositories import InMemoryKeyValueStore, encode_entry
from prayersync.services import TieredTimeCache

from conftest import LONDON, FailingStore, FakeClock, FakeTimingsProvider, build_cache

DAY = date(2025, 6, 13)


@pytest.mark.asyncio
async def test_repeated_lookup_fetches_once(cache, provider):
    first = await cache.lookup(LONDON, DAY, CalculationMethod.MWL)
    second = await cache.lookup(LONDON, DAY, CalculationMethod.MWL)

    assert first == second
    assert first.get(PrayerName.FAJR) == "02:58"
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_write_through_to_durable(cache, store):
    await cache.lookup(LONDON, DAY)
    assert "times:51.5074:-0.1278:2025-06-13:3:0" in store.keys()


@pytest.mark.asyncio
async def test_durable_hit_rehydrates_volatile(provider, store, clock):
    await build_cache(provider, store, clock).lookup(LONDON, DAY)
    assert len(provider.calls) == 1

    # New process: empty volatile tier, same durable store
    fresh_cache = build_cache(provider, store, clock)
    provider.go_offline()
    times = await fresh_cache.lookup(LONDON, DAY)
    assert times.get(PrayerName.ISHA) == "22:59"
    assert len(provider.calls) == 1

    volatile = fresh_cache.tiers[0]
    assert len(volatile) == 1


@pytest.mark.asyncio
async def test_expired_entry_is_refetched(cache, provider, clock):
    await cache.lookup(LONDON, DAY)
    clock.advance(3601)
    await cache.lookup(LONDON, DAY)
    assert len(provider.calls) == 2


@pytest.mark.asyncio
async def test_stale_entry_served_when_upstream_fails(cache, provider, clock):
    await cache.lookup(LONDON, DAY)
    clock.advance(7200)
    provider.go_offline()

    times = await cache.lookup(LONDON, DAY)
    assert times.get(PrayerName.FAJR) == "02:58"
    assert not times.is_fallback


@pytest.mark.asyncio
async def test_offline_without_data_raises(cache, provider):
    provider.go_offline()
    with pytest.raises(AllTiersExhausted):
        await cache.lookup(LONDON, DAY)


@pytest.mark.asyncio
async def test_invalid_payload_is_recovered_like_unavailable(cache, provider):
    provider.error = InvalidUpstreamPayload("no timings")
    with pytest.raises(AllTiersExhausted):
        await cache.lookup(LONDON, DAY)


@pytest.mark.asyncio
async def test_missing_prayer_in_payload_is_exhausted(cache, provider):
    del provider.timings["Asr"]
    with pytest.raises(AllTiersExhausted):
        await cache.lookup(LONDON, DAY)


@pytest.mark.asyncio
async def test_fallback_when_offline(cache, provider):
    provider.go_offline()
    times = await cache.get_prayer_times_for_date(LONDON, DAY)
    assert times.is_fallback
    assert times == PrayerTimeSet.fallback()


@pytest.mark.asyncio
async def test_get_prayer_times_uses_location_date(cache, provider):
    # 23:30 UTC on the 12th is already the 13th in London during BST
    instant = datetime(2025, 6, 12, 23, 30, tzinfo=timezone.utc)
    await cache.get_prayer_times(LONDON, instant)
    fetched_dates = [call[0] for call in provider.calls]
    assert fetched_dates[-1] == date(2025, 6, 13)


@pytest.mark.asyncio
async def test_get_prayer_times_never_raises_offline(cache, provider):
    provider.go_offline()
    times = await cache.get_prayer_times(LONDON, datetime(2025, 6, 13, 9, 0))
    assert times.is_fallback


@pytest.mark.asyncio
async def test_failing_durable_writes_do_not_change_outcome(provider, clock):
    cache = build_cache(provider, FailingStore(), clock)
    first = await cache.lookup(LONDON, DAY)
    second = await cache.lookup(LONDON, DAY)
    assert first == second
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_corrupt_durable_entry_is_a_miss(provider, store, clock):
    await store.set("times:51.5074:-0.1278:2025-06-13:3:0", b"{not json")
    cache = build_cache(provider, store, clock)
    times = await cache.lookup(LONDON, DAY)
    assert times.get(PrayerName.DHUHR) == "13:01"
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_methods_are_cached_separately(cache, provider):
    await cache.lookup(LONDON, DAY, CalculationMethod.MWL)
    await cache.lookup(LONDON, DAY, CalculationMethod.ISNA)
    assert [call[2] for call in provider.calls] == [CalculationMethod.MWL, CalculationMethod.ISNA]


@pytest.mark.asyncio
async def test_schools_are_cached_separately(cache, provider, store):
    standard = await cache.lookup(LONDON, DAY, school=AsrSchool.STANDARD)
    hanafi = await cache.lookup(LONDON, DAY, school="hanafi")
    await cache.lookup(LONDON, DAY, school=1)

    assert standard == hanafi
    assert [call[3] for call in provider.calls] == [AsrSchool.STANDARD, AsrSchool.HANAFI]
    assert "times:51.5074:-0.1278:2025-06-13:3:0" in store.keys()
    assert "times:51.5074:-0.1278:2025-06-13:3:1" in store.keys()


@pytest.mark.asyncio
async def test_invalidate_forces_refetch(cache, provider, store):
    await cache.lookup(LONDON, DAY)
    await cache.invalidate(LONDON, DAY)
    assert "times:51.5074:-0.1278:2025-06-13:3:0" not in store.keys()

    await cache.lookup(LONDON, DAY)
    assert len(provider.calls) == 2


@pytest.mark.asyncio
async def test_fetch_teaches_resolver_the_zone(cache, provider):
    await cache.lookup(LONDON, DAY)
    assert await cache.resolver.resolve(LONDON) == "Europe/London"
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_newest_stale_entry_wins(provider, store, clock):
    cache = build_cache(provider, store, clock)
    key = CacheKey(LONDON, DAY, CalculationMethod.MWL)

    older = PrayerTimeSet.from_dict({"Fajr": "03:00", "Dhuhr": "13:00", "Asr": "17:00", "Maghrib": "21:00", "Isha": "23:00"})
    newer = PrayerTimeSet.from_dict({"Fajr": "03:05", "Dhuhr": "13:05", "Asr": "17:05", "Maghrib": "21:05", "Isha": "23:05"})
    await cache.tiers[0].set(key, CacheEntry(value=older, created_at=clock() - 10_000))
    await store.set(str(key), encode_entry(CacheEntry(value=newer, created_at=clock() - 5_000)))

    provider.go_offline()
    times = await cache.lookup(LONDON, DAY)
    assert times.get(PrayerName.FAJR) == "03:05"


@pytest.mark.asyncio
async def test_local_midnight_splits_cache_keys(cache, provider):
    provider.zone = "Australia/Brisbane"
    brisbane = Coordinate(-27.4698, 153.0251)

    # 23:58 and 00:02 Brisbane time (UTC+10), four minutes apart
    await cache.get_prayer_times(brisbane, datetime(2025, 6, 13, 13, 58, tzinfo=timezone.utc))
    await cache.get_prayer_times(brisbane, datetime(2025, 6, 13, 14, 2, tzinfo=timezone.utc))

    fetched_dates = [call[0] for call in provider.calls[1:]]
    assert fetched_dates == [date(2025, 6, 13), date(2025, 6, 14)]


def test_zero_ttl_is_rejected(provider, store, clock):
    with pytest.raises(ValueError):
        build_cache(provider, store, clock, ttl=0)


@pytest.mark.asyncio
async def test_explicit_ttl_is_honoured(provider, store, clock):
    cache = build_cache(provider, store, clock, ttl=60)
    await cache.lookup(LONDON, DAY)
    clock.advance(61)
    await cache.lookup(LONDON, DAY)
    assert len(provider.calls) == 2


@pytest.mark.asyncio
async def test_create_wires_resolver_from_settings():
    provider = FakeTimingsProvider()
    clock = FakeClock()
    config = Settings(durable_backend="memory", default_method=2, default_school=1, time_data_ttl=3600)
    cache = TieredTimeCache.create(provider=provider, store=InMemoryKeyValueStore(), config=config, clock=clock)

    assert cache.default_method == CalculationMethod.ISNA
    assert cache.default_school == AsrSchool.HANAFI
    assert await cache.resolver.resolve(LONDON) == "Europe/London"
    # Metadata lookup uses the configured method and the injected clock's date
    assert provider.calls == [(DAY, LONDON, CalculationMethod.ISNA, AsrSchool.STANDARD)]

    await cache.lookup(LONDON, DAY)
    assert provider.calls[-1] == (DAY, LONDON, CalculationMethod.ISNA, AsrSchool.HANAFI)
