"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from prayersync.services import PrayerCalendarService, TieredTimeCache

    # Using factory methods (recommended)
    cache = TieredTimeCache.create()
    service = PrayerCalendarService.create(cache=cache)

    # Or manual creation
    cache = TieredTimeCache(tiers=[VolatileTier(), ...], resolver=resolver)
    ```
"""

from .calendar_encoder import CalendarEncoder, escape_text, fold_line
from .calendar_service import PrayerCalendarService
from .time_cache import TieredTimeCache
from .timezone_resolver import TimezoneResolver
from .utc_converter import UtcConverter, local_civil_date, to_utc_instant, utc_offset_for_date

__all__ = [
    "CalendarEncoder",
    "PrayerCalendarService",
    "TieredTimeCache",
    "TimezoneResolver",
    "UtcConverter",
    "escape_text",
    "fold_line",
    "local_civil_date",
    "to_utc_instant",
    "utc_offset_for_date",
]
