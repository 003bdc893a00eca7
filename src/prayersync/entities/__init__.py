"""Domain entities for internal representation.

These are frozen dataclasses used by services and repositories. They are
NOT used for API contracts - use DTOs from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- No external dependencies
"""

from .cache_entry import CacheEntry, CacheKey, metadata_key
from .calendar_event import CalendarEvent, derive_uid, format_utc
from .calendar_export import CalendarExport
from .coordinate import Coordinate
from .prayer_times import EVENT_PRAYERS, FALLBACK_TIMES, PrayerName, PrayerTimeSet
from .timings_payload import TimingsPayload

__all__ = [
    "CacheEntry",
    "CacheKey",
    "CalendarEvent",
    "CalendarExport",
    "Coordinate",
    "EVENT_PRAYERS",
    "FALLBACK_TIMES",
    "PrayerName",
    "PrayerTimeSet",
    "TimingsPayload",
    "derive_uid",
    "format_utc",
    "metadata_key",
]
