"""
Shared fixtures: in-memory fakes for the provider and stores, a controllable clock.
"""

from datetime import date

import pytest

from prayersync.config import Settings
from prayersync.entities import Coordinate, TimingsPayload
from prayersync.errors import UpstreamUnavailable
from prayersync.methods import AsrSchool, CalculationMethod
from prayersync.repositories import DurableTier, InMemoryKeyValueStore, UpstreamTier, VolatileTier
from prayersync.services import TieredTimeCache, TimezoneResolver

LONDON = Coordinate(51.5074, -0.1278)

LONDON_TIMINGS = {
    "Fajr": "02:58",
    "Sunrise": "04:43",
    "Dhuhr": "13:01",
    "Asr": "17:23",
    "Sunset": "21:18",
    "Maghrib": "21:18",
    "Isha": "22:59",
    "Imsak": "02:48",
    "Midnight": "01:01",
}


class FakeClock:
    """Manually advanced unix clock."""

    def __init__(self, now: float = 1_749_790_800.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTimingsProvider:
    """TimingsProvider fake that records calls and can be told to fail.

    failures_left makes the next N calls fail before it answers again.
    """

    def __init__(
        self,
        timings: dict[str, str] | None = None,
        zone: str = "Europe/London",
        failures_left: int = 0,
    ) -> None:
        self.timings = dict(timings or LONDON_TIMINGS)
        self.zone = zone
        self.calls: list[tuple[date, Coordinate, CalculationMethod, AsrSchool]] = []
        self.error: Exception | None = None
        self.failures_left = failures_left

    async def fetch_timings(
        self,
        civil_date: date,
        coordinate: Coordinate,
        method: CalculationMethod,
        school: AsrSchool = AsrSchool.STANDARD,
    ) -> TimingsPayload:
        self.calls.append((civil_date, coordinate, method, school))
        if self.error is not None:
            raise self.error
        if self.failures_left > 0:
            self.failures_left -= 1
            raise UpstreamUnavailable("connection reset")
        return TimingsPayload(timings=dict(self.timings), timezone=self.zone, raw_meta={})

    async def is_available(self) -> bool:
        return self.error is None

    def go_offline(self) -> None:
        self.error = UpstreamUnavailable("connection refused")


class FailingStore(InMemoryKeyValueStore):
    """Store whose writes always fail."""

    async def set(self, key: str, value: bytes) -> bool:
        return False


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def provider() -> FakeTimingsProvider:
    return FakeTimingsProvider()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def config() -> Settings:
    return Settings(durable_backend="memory", time_data_ttl=3600)


@pytest.fixture
def resolver(provider, store, clock) -> TimezoneResolver:
    return TimezoneResolver(provider=provider, store=store, clock=clock)


def build_cache(provider, store, clock, ttl: float = 3600) -> TieredTimeCache:
    """Wire the standard three tiers over the given fakes."""
    resolver = TimezoneResolver(provider=provider, store=store, clock=clock)

    async def remember_zone(key, zone):
        await resolver.remember(key.coordinate, zone)

    return TieredTimeCache(
        tiers=[
            VolatileTier(),
            DurableTier(store),
            UpstreamTier(provider, clock=clock, on_timezone=remember_zone),
        ],
        resolver=resolver,
        ttl=ttl,
        default_method=CalculationMethod.MWL,
        precision=4,
        clock=clock,
    )


@pytest.fixture
def cache(provider, store, clock) -> TieredTimeCache:
    return build_cache(provider, store, clock)
