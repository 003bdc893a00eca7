"""HTTP handlers for prayer-time and calendar operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import logging
from datetime import datetime, timezone

from fastapi import HTTPException, Response, status

from prayersync.dto import CalendarQuery, HealthCheckResponse, PrayerTimesQuery, PrayerTimesResponse
from prayersync.entities import Coordinate
from prayersync.errors import UnknownTimezone, UpstreamUnavailable
from prayersync.methods import resolve_method, resolve_school
from prayersync.protocols import KeyValueStore, TimingsProvider
from prayersync.services import PrayerCalendarService, TieredTimeCache, local_civil_date

logger = logging.getLogger(__name__)

CALENDAR_MEDIA_TYPE = "text/calendar; charset=utf-8"


class CalendarHandler:
    """HTTP handlers for prayer times and calendar export.

    This handler delegates business logic to TieredTimeCache and
    PrayerCalendarService and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Mapping invalid input to 400 and internal failures to 500
    - Setting calendar download headers

    Example:
        ```python
        handler = CalendarHandler(cache=cache, calendar_service=service, store=store, provider=provider)

        @app.get("/calendar.ics")
        async def calendar(query: Annotated[CalendarQuery, Query()]):
            return await handler.export_calendar(query)
        ```
    """

    def __init__(
        self,
        cache: TieredTimeCache,
        calendar_service: PrayerCalendarService,
        store: KeyValueStore,
        provider: TimingsProvider,
    ) -> None:
        """Initialize the calendar handler.

        Args:
            cache: Tiered prayer-time cache (required).
            calendar_service: Calendar export service (required).
            store: Durable store, probed by the health check.
            provider: Timings provider, probed by the health check.
        """
        self._cache = cache
        self._calendar = calendar_service
        self._store = store
        self._provider = provider

    async def get_prayer_times(self, query: PrayerTimesQuery) -> PrayerTimesResponse:
        """Handle GET /prayer-times requests.

        Raises:
            HTTPException: 400 for an unknown method or school, 500 for internal errors
        """
        try:
            coordinate = Coordinate(query.latitude, query.longitude)
            method = resolve_method(query.method, self._cache.default_method)
            school = resolve_school(query.school, self._cache.default_school)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

        try:
            try:
                zone: str | None = await self._cache.resolver.resolve(coordinate)
            except UpstreamUnavailable as e:
                logger.warning(f"Timezone unavailable for {coordinate.label()}: {e}")
                zone = None

            if query.date is not None:
                civil_date = query.date
                times = await self._cache.get_prayer_times_for_date(coordinate, civil_date, method, school)
            else:
                now = datetime.now(timezone.utc)
                civil_date = local_civil_date(now, zone) if zone else now.date()
                times = await self._cache.get_prayer_times(coordinate, now, method, school)

            return PrayerTimesResponse(
                latitude=coordinate.latitude,
                longitude=coordinate.longitude,
                date=civil_date,
                timezone=zone,
                method=int(method),
                method_name=method.authority,
                school=int(school),
                times=times.to_dict(),
                is_fallback=times.is_fallback,
            )

        except UnknownTimezone as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Provider returned an unusable timezone: {e}",
            ) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get prayer times: {e}",
            ) from e

    async def export_calendar(self, query: CalendarQuery) -> Response:
        """Handle GET /calendar.ics requests.

        Offline conditions still produce a 200 with a degraded calendar.

        Raises:
            HTTPException: 400 for invalid input, 500 for internal errors
        """
        try:
            coordinate = Coordinate(query.latitude, query.longitude)
            export = await self._calendar.export(
                coordinate,
                days=query.days,
                method=query.method,
                school=query.school,
                discreet=query.discreet,
            )
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to export calendar: {e}",
            ) from e

        return Response(
            content=export.document,
            media_type=CALENDAR_MEDIA_TYPE,
            headers={
                "Content-Disposition": f'attachment; filename="{export.filename}"',
                "X-Calendar-Timezone": export.timezone,
                "X-Calendar-Degraded": "true" if export.degraded else "false",
            },
        )

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        store_healthy = await self._store.health_check()
        upstream_healthy = await self._provider.is_available()

        return HealthCheckResponse(
            status="healthy" if store_healthy and upstream_healthy else "degraded",
            store_healthy=store_healthy,
            upstream_healthy=upstream_healthy,
        )
