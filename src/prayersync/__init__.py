"""PrayerSync - prayer times for any location, exported as iCalendar.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (KeyValueStore, TimingsProvider, CacheTier)
    - repositories: Data access implementations (AlAdhan, Redis, files, tiers)
    - services: Business logic (timezone resolution, tiered cache, UTC
      conversion, calendar encoding and export)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from prayersync import Coordinate, PrayerCalendarService

    service = PrayerCalendarService.create()
    export = await service.export(Coordinate(51.5074, -0.1278), days=30)
    ```

For HTTP API:
    ```python
    from prayersync.api.app import app
    ```
"""

__version__ = "0.1.0"

from prayersync.config import configure_logging, get_redis_client, settings
from prayersync.entities import CalendarEvent, CalendarExport, Coordinate, PrayerName, PrayerTimeSet
from prayersync.errors import (
    AllTiersExhausted,
    DurableStoreError,
    InvalidTimeString,
    InvalidUpstreamPayload,
    MetadataMissing,
    PrayerSyncError,
    UnknownTimezone,
    UpstreamUnavailable,
)
from prayersync.methods import AsrSchool, CalculationMethod, resolve_method, resolve_school
from prayersync.protocols import CacheTier, KeyValueStore, TimingsProvider
from prayersync.repositories import AladhanTimingsProvider, RedisKeyValueStore
from prayersync.services import (
    CalendarEncoder,
    PrayerCalendarService,
    TieredTimeCache,
    TimezoneResolver,
    UtcConverter,
    to_utc_instant,
)

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    "configure_logging",
    # Protocols (interfaces)
    "CacheTier",
    "KeyValueStore",
    "TimingsProvider",
    # Services (business logic)
    "TimezoneResolver",
    "TieredTimeCache",
    "UtcConverter",
    "CalendarEncoder",
    "PrayerCalendarService",
    "to_utc_instant",
    # Repositories (data access)
    "AladhanTimingsProvider",
    "RedisKeyValueStore",
    # Entities (domain models)
    "Coordinate",
    "PrayerName",
    "PrayerTimeSet",
    "CalendarEvent",
    "CalendarExport",
    "AsrSchool",
    "CalculationMethod",
    "resolve_method",
    "resolve_school",
    # Errors
    "PrayerSyncError",
    "UpstreamUnavailable",
    "InvalidUpstreamPayload",
    "MetadataMissing",
    "AllTiersExhausted",
    "DurableStoreError",
    "InvalidTimeString",
    "UnknownTimezone",
]
