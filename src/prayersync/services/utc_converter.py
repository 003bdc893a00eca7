"""Conversion of location-local prayer times to exact UTC instants.

A zone's UTC offset is not a constant: the same location can be UTC+0 in
winter and UTC+1 in summer. The offset is therefore derived for the specific
civil date being converted, never taken from "now" or reused across dates.
The host machine's timezone plays no part.
"""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from prayersync.errors import UnknownTimezone
from prayersync.utils import parse_time_of_day

# Offsets are sampled at noon UTC: DST transitions happen around local
# midnight or early morning, well away from noon in every real zone.
OFFSET_REFERENCE_TIME = time(12, 0)


def load_zone(name: str) -> ZoneInfo:
    """Load an IANA zone.

    Raises:
        UnknownTimezone: If the identifier cannot be resolved
    """
    if not isinstance(name, str) or not name:
        raise UnknownTimezone(name)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise UnknownTimezone(name) from e


def utc_offset_for_date(civil_date: date, zone: ZoneInfo) -> timedelta:
    """The zone's UTC offset in force on a civil date.

    Args:
        civil_date: The date
        zone: The zone

    Returns:
        Offset east of UTC (e.g. +1h for BST, -4h for EDT)
    """
    reference = datetime.combine(civil_date, OFFSET_REFERENCE_TIME, tzinfo=timezone.utc)
    offset = reference.astimezone(zone).utcoffset()
    return offset if offset is not None else timedelta(0)


class UtcConverter:
    """Converts (civil date, local time, zone) to an aware UTC datetime.

    Offsets are memoised per (zone, date) for the lifetime of the instance;
    create one converter per export operation.

    Example:
        ```python
        converter = UtcConverter()
        converter.to_utc_instant(date(2025, 6, 13), "05:42", "Europe/London")
        # datetime(2025, 6, 13, 4, 42, tzinfo=timezone.utc)
        ```
    """

    def __init__(self) -> None:
        self._zones: dict[str, ZoneInfo] = {}
        self._offsets: dict[tuple[str, date], timedelta] = {}

    def zone(self, name: str) -> ZoneInfo:
        if name not in self._zones:
            self._zones[name] = load_zone(name)
        return self._zones[name]

    def offset_for(self, civil_date: date, zone_name: str) -> timedelta:
        """Date-specific offset for a zone, memoised."""
        cache_key = (zone_name, civil_date)
        if cache_key not in self._offsets:
            self._offsets[cache_key] = utc_offset_for_date(civil_date, self.zone(zone_name))
        return self._offsets[cache_key]

    def to_utc_instant(self, civil_date: date, local_time: str, zone_name: str) -> datetime:
        """Convert a local wall-clock time on a civil date to UTC.

        Args:
            civil_date: Date in the zone's calendar
            local_time: "HH:MM" or "HH:MM:SS"
            zone_name: IANA zone identifier

        Returns:
            Aware datetime in UTC

        Raises:
            InvalidTimeString: If local_time cannot be parsed
            UnknownTimezone: If zone_name cannot be resolved
        """
        tod = parse_time_of_day(local_time)
        offset = self.offset_for(civil_date, zone_name)

        wall_clock = datetime(
            civil_date.year,
            civil_date.month,
            civil_date.day,
            tod.hour,
            tod.minute,
            tod.second,
            tzinfo=timezone.utc,
        )
        return wall_clock - offset


def to_utc_instant(civil_date: date, local_time: str, zone_name: str) -> datetime:
    """One-off conversion without memoisation."""
    return UtcConverter().to_utc_instant(civil_date, local_time, zone_name)


def local_civil_date(instant: datetime, zone_name: str) -> date:
    """The calendar date an observer in the zone sees at an instant.

    Naive instants are taken to be UTC, never host-local time.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(load_zone(zone_name)).date()
