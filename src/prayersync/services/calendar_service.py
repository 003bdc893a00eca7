"""Calendar export service.

Orchestrates a full export: resolve the location's zone, fetch each day's
prayer times through the tiered cache, convert them to UTC and encode the
result as an .ics document.
"""

import logging
import time
from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone

from prayersync.config import Settings, settings
from prayersync.entities import CalendarEvent, CalendarExport, Coordinate, PrayerTimeSet
from prayersync.errors import AllTiersExhausted, UpstreamUnavailable
from prayersync.methods import AsrSchool, CalculationMethod, resolve_method, resolve_school
from prayersync.services.calendar_encoder import CalendarEncoder
from prayersync.services.time_cache import TieredTimeCache
from prayersync.services.utc_converter import UtcConverter, local_civil_date

logger = logging.getLogger(__name__)

FALLBACK_ZONE = "UTC"


class PrayerCalendarService:
    """Builds prayer-time calendars for a location.

    Example:
        ```python
        service = PrayerCalendarService.create()
        export = await service.export(Coordinate(51.5074, -0.1278), days=30)
        Path(export.filename).write_text(export.document, newline="")
        ```
    """

    def __init__(
        self,
        cache: TieredTimeCache,
        encoder: CalendarEncoder | None = None,
        config: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the calendar service.

        Args:
            cache: Source of prayer times and timezones.
            encoder: iCalendar encoder. Defaults to CalendarEncoder().
            config: Export settings. If None, uses global settings.
            clock: Returns the current unix time.
        """
        self._cache = cache
        self._encoder = encoder or CalendarEncoder()
        self._config = config or settings
        self._clock = clock

    @classmethod
    def create(
        cls,
        cache: TieredTimeCache | None = None,
        config: Settings | None = None,
    ) -> "PrayerCalendarService":
        """Factory method to create the service with the default cache stack."""
        config = config or settings
        return cls(cache=cache or TieredTimeCache.create(config=config), config=config)

    @property
    def cache(self) -> TieredTimeCache:
        return self._cache

    def _validate_days(self, days: int | None) -> int:
        days = self._config.default_export_days if days is None else days
        if not 1 <= days <= self._config.max_export_days:
            raise ValueError(f"days must be between 1 and {self._config.max_export_days}, got {days}")
        return days

    async def _resolve_zone(
        self,
        coordinate: Coordinate,
        method: CalculationMethod,
        school: AsrSchool,
        start_date: date | None,
    ) -> str | None:
        """The location's zone, or None if it cannot be learned.

        A failed metadata lookup is retried through one timings fetch: every
        successful fetch teaches the resolver the zone, so the second resolve
        is answered from memory.
        """
        resolver = self._cache.resolver
        try:
            return await resolver.resolve(coordinate)
        except UpstreamUnavailable as e:
            logger.warning(f"Timezone lookup failed for {coordinate.label()}: {e}")

        first_day = start_date or datetime.fromtimestamp(self._clock(), tz=timezone.utc).date()
        try:
            await self._cache.lookup(coordinate, first_day, method, school)
            return await resolver.resolve(coordinate)
        except (AllTiersExhausted, UpstreamUnavailable) as e:
            logger.warning(f"Timezone unavailable for {coordinate.label()}, exporting fallback times in UTC: {e}")
            return None

    async def _collect(
        self,
        coordinate: Coordinate,
        days: int,
        method: CalculationMethod,
        school: AsrSchool,
        start_date: date | None,
        discreet: bool,
        location_label: str | None,
    ) -> tuple[list[CalendarEvent], str, date, bool]:
        resolved = await self._resolve_zone(coordinate, method, school, start_date)
        # Live local times are only meaningful in their own zone: without it,
        # every day uses the fallback set read as UTC.
        zone_known = resolved is not None
        zone = resolved or FALLBACK_ZONE
        degraded = not zone_known

        if start_date is None:
            now = datetime.fromtimestamp(self._clock(), tz=timezone.utc)
            start_date = local_civil_date(now, zone)

        converter = UtcConverter()
        duration = timedelta(minutes=self._config.event_duration_minutes)
        alarm_offset = timedelta(minutes=self._config.alarm_offset_minutes)
        location = location_label if location_label is not None else coordinate.label()

        events: list[CalendarEvent] = []
        for offset in range(days):
            day = start_date + timedelta(days=offset)
            if zone_known:
                times = await self._cache.get_prayer_times_for_date(coordinate, day, method, school)
            else:
                times = PrayerTimeSet.fallback()
            degraded = degraded or times.is_fallback
            for prayer, local_time in times.events():
                start = converter.to_utc_instant(day, local_time, zone)
                events.append(
                    CalendarEvent.for_prayer(
                        prayer,
                        start,
                        uid_domain=self._config.uid_domain,
                        duration=duration,
                        alarm_offset=alarm_offset,
                        location=location,
                        discreet=discreet,
                    )
                )
        return events, zone, start_date, degraded

    async def build_events(
        self,
        coordinate: Coordinate,
        days: int | None = None,
        method: CalculationMethod | int | str | None = None,
        school: AsrSchool | int | str | None = None,
        start_date: date | None = None,
        discreet: bool = False,
        location_label: str | None = None,
    ) -> list[CalendarEvent]:
        """Build the five daily prayer events for each day in the range.

        Args:
            coordinate: Location
            days: Number of days, starting at start_date. Defaults to settings.
            method: Calculation method. None uses the default.
            school: Asr juristic school. None uses the default.
            start_date: First civil date. Defaults to today at the location.
            discreet: Neutral wording for shared work calendars
            location_label: LOCATION text. Defaults to the coordinate.

        Returns:
            Events in chronological order

        Raises:
            ValueError: If days is out of range or method is unknown
        """
        days = self._validate_days(days)
        method = resolve_method(method, self._cache.default_method)
        school = resolve_school(school, self._cache.default_school)
        events, _, _, _ = await self._collect(coordinate, days, method, school, start_date, discreet, location_label)
        return events

    async def export(
        self,
        coordinate: Coordinate,
        days: int | None = None,
        method: CalculationMethod | int | str | None = None,
        school: AsrSchool | int | str | None = None,
        title: str | None = None,
        description: str | None = None,
        location_label: str | None = None,
        discreet: bool = False,
        start_date: date | None = None,
        generated_at: datetime | None = None,
    ) -> CalendarExport:
        """Build and encode a calendar.

        Never fails for offline conditions: an unresolvable zone exports in
        UTC and missing times use the fallback set; both mark the export
        degraded.

        Raises:
            ValueError: If days is out of range or method is unknown
        """
        days = self._validate_days(days)
        method = resolve_method(method, self._cache.default_method)
        school = resolve_school(school, self._cache.default_school)
        events, zone, first_day, degraded = await self._collect(
            coordinate, days, method, school, start_date, discreet, location_label
        )

        place = location_label if location_label is not None else coordinate.label()
        document = self._encoder.encode(
            events,
            calendar_title=title or self._config.calendar_name,
            calendar_description=description or f"Islamic prayer times for {place} ({method.authority})",
            generated_at=generated_at,
        )

        logger.info(
            f"Exported {len(events)} events for {place} over {days} days "
            f"(zone={zone}, degraded={degraded})"
        )
        return CalendarExport(
            document=document,
            timezone=zone,
            event_count=len(events),
            start_date=first_day,
            days=days,
            degraded=degraded,
        )
