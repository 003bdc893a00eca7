"""
Tests for end-to-end calendar export.
"""

from datetime import date, datetime, timezone

import pytest

from prayersync.config import Settings
from prayersync.methods import AsrSchool
from prayersync.services import PrayerCalendarService

from conftest import LONDON, FakeTimingsProvider, build_cache

GENERATED_AT = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(cache, config, clock) -> PrayerCalendarService:
    return PrayerCalendarService(cache=cache, config=config, clock=clock)


@pytest.mark.asyncio
async def test_build_events_converts_to_utc(service):
    events = await service.build_events(LONDON, days=2, start_date=date(2025, 6, 13))

    assert len(events) == 10
    fajr = events[0]
    assert fajr.summary == "Fajr Prayer"
    assert fajr.start == datetime(2025, 6, 13, 1, 58, tzinfo=timezone.utc)
    assert fajr.location == "51.5074, -0.1278"
    assert events[5].start.date() == date(2025, 6, 14)


@pytest.mark.asyncio
async def test_export_document(service, provider):
    export = await service.export(LONDON, days=3, start_date=date(2025, 6, 13), generated_at=GENERATED_AT)

    assert export.timezone == "Europe/London"
    assert export.event_count == 15
    assert export.days == 3
    assert not export.degraded
    assert export.document.count("BEGIN:VEVENT") == 15
    assert "X-WR-CALNAME:Prayer Times - PrayerSync" in export.document
    # one metadata lookup plus one fetch per day
    assert len(provider.calls) == 4


@pytest.mark.asyncio
async def test_export_is_repeatable(service):
    first = await service.export(LONDON, days=2, start_date=date(2025, 6, 13), generated_at=GENERATED_AT)
    second = await service.export(LONDON, days=2, start_date=date(2025, 6, 13), generated_at=GENERATED_AT)
    assert first.document == second.document


@pytest.mark.asyncio
async def test_export_across_dst_change(service):
    events = await service.build_events(LONDON, days=3, start_date=date(2025, 3, 29))
    fajr = [e for e in events if e.summary == "Fajr Prayer"]
    # Same local clock time, one hour earlier in UTC once BST starts
    assert fajr[0].start.hour == 2
    assert fajr[2].start.hour == 1


@pytest.mark.asyncio
async def test_discreet_export(service):
    export = await service.export(LONDON, days=1, start_date=date(2025, 6, 13), discreet=True)
    assert "SUMMARY:Personal Time" in export.document
    assert "Fajr Prayer" not in export.document


@pytest.mark.asyncio
async def test_offline_export_is_degraded_utc(service, provider):
    provider.go_offline()
    export = await service.export(LONDON, days=1, start_date=date(2025, 6, 13), generated_at=GENERATED_AT)

    assert export.degraded
    assert export.timezone == "UTC"
    assert export.event_count == 5
    assert "DTSTART:20250613T053000Z" in export.document


@pytest.mark.asyncio
async def test_start_date_defaults_to_location_today(provider, store, clock):
    # 2025-06-12 23:30 UTC is already the 13th in Tokyo
    clock.now = datetime(2025, 6, 12, 23, 30, tzinfo=timezone.utc).timestamp()
    provider.zone = "Asia/Tokyo"
    service = PrayerCalendarService(cache=build_cache(provider, store, clock), clock=clock)

    export = await service.export(LONDON, days=1)
    assert export.start_date == date(2025, 6, 13)


@pytest.mark.asyncio
@pytest.mark.parametrize("days", [0, 367])
async def test_days_out_of_range(service, days):
    with pytest.raises(ValueError):
        await service.export(LONDON, days=days)


@pytest.mark.asyncio
async def test_custom_event_settings(cache, clock):
    config = Settings(durable_backend="memory", event_duration_minutes=20, alarm_offset_minutes=10)
    service = PrayerCalendarService(cache=cache, config=config, clock=clock)
    export = await service.export(LONDON, days=1, start_date=date(2025, 6, 13))
    assert "TRIGGER:-PT10M" in export.document
    assert "DTEND:20250613T021800Z" in export.document


@pytest.mark.asyncio
async def test_zone_learned_from_first_fetch_after_lookup_fails(store, clock):
    # The metadata lookup fails once; the first day's timings carry the zone
    provider = FakeTimingsProvider(failures_left=1)
    service = PrayerCalendarService(cache=build_cache(provider, store, clock), clock=clock)

    export = await service.export(LONDON, days=1, start_date=date(2025, 6, 13), generated_at=GENERATED_AT)

    assert export.timezone == "Europe/London"
    assert not export.degraded
    assert "DTSTART:20250613T015800Z" in export.document
    assert len(provider.calls) == 2


@pytest.mark.asyncio
async def test_learned_zone_sets_default_start_date(store, clock):
    # 2025-06-12 23:30 UTC is already the 13th in Tokyo
    clock.now = datetime(2025, 6, 12, 23, 30, tzinfo=timezone.utc).timestamp()
    provider = FakeTimingsProvider(zone="Asia/Tokyo", failures_left=1)
    service = PrayerCalendarService(cache=build_cache(provider, store, clock), clock=clock)

    export = await service.export(LONDON, days=1)
    assert export.timezone == "Asia/Tokyo"
    assert export.start_date == date(2025, 6, 13)


@pytest.mark.asyncio
async def test_cached_times_without_zone_are_not_read_as_utc(provider, store, clock):
    await build_cache(provider, store, clock).lookup(LONDON, date(2025, 6, 13))
    await store.delete("meta:51.5074:-0.1278")

    # New process: cached times survive, the zone does not, upstream is down
    provider.go_offline()
    service = PrayerCalendarService(cache=build_cache(provider, store, clock), clock=clock)
    export = await service.export(LONDON, days=2, start_date=date(2025, 6, 13), generated_at=GENERATED_AT)

    assert export.degraded
    assert export.timezone == "UTC"
    assert export.document.count("DTSTART:") == 10
    assert "DTSTART:20250613T053000Z" in export.document
    assert "T025800Z" not in export.document


@pytest.mark.asyncio
async def test_export_passes_school_upstream(service, provider):
    await service.export(LONDON, days=1, start_date=date(2025, 6, 13), school="hanafi")
    assert provider.calls[-1][3] == AsrSchool.HANAFI


@pytest.mark.asyncio
async def test_unknown_school_is_rejected(service):
    with pytest.raises(ValueError):
        await service.export(LONDON, days=1, school="maliki")
