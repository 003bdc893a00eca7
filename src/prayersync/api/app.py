from typing import Annotated, Any

from fastapi import FastAPI, Query, Response
from fastapi.middleware.cors import CORSMiddleware

from prayersync import __version__
from prayersync.api.dependencies import HandlerDep, lifespan
from prayersync.config import settings
from prayersync.dto import CalendarQuery, HealthCheckResponse, PrayerTimesQuery, PrayerTimesResponse
from prayersync.methods import METHOD_AUTHORITIES

app = FastAPI(
    title="PrayerSync API",
    description="Prayer times and iCalendar export for any location",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "PrayerSync API",
        "version": __version__,
        "description": "Prayer times and iCalendar export for any location",
        "methods": {int(m): name for m, name in METHOD_AUTHORITIES.items()},
        "endpoints": {
            "prayer_times": "/prayer-times",
            "calendar": "/calendar.ics",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@app.get("/prayer-times", response_model=PrayerTimesResponse)
async def prayer_times(
    query: Annotated[PrayerTimesQuery, Query()],
    handler: HandlerDep,
) -> PrayerTimesResponse:
    """
    Get one day of prayer times for a location.

    Falls back to static default times (is_fallback=true) when the
    timings provider is unreachable and nothing is cached.
    """
    return await handler.get_prayer_times(query)


@app.get("/calendar.ics", response_class=Response)
async def calendar(
    query: Annotated[CalendarQuery, Query()],
    handler: HandlerDep,
) -> Response:
    """
    Download an iCalendar file with the five daily prayers.

    Import it into Google Calendar, Outlook or Apple Calendar.
    """
    return await handler.export_calendar(query)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "prayersync.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
