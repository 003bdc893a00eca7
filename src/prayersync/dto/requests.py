"""Request DTOs for API endpoints."""

import datetime as dt

from pydantic import BaseModel, Field


class PrayerTimesQuery(BaseModel):
    """Query parameters for GET /prayer-times.

    The handler will convert this to internal calls to the service layer.
    """

    latitude: float = Field(..., description="Degrees north", ge=-90.0, le=90.0)
    longitude: float = Field(..., description="Degrees east", ge=-180.0, le=180.0)
    date: dt.date | None = Field(
        None,
        description="Date in the location's calendar (YYYY-MM-DD). Defaults to today there.",
    )
    method: str | None = Field(
        None,
        description="Calculation method id (e.g. 2) or name (e.g. ISNA). Defaults to MWL.",
    )
    school: str | None = Field(
        None,
        description="Asr juristic school: 0 or standard, 1 or hanafi. Defaults to standard.",
    )


class CalendarQuery(BaseModel):
    """Query parameters for GET /calendar.ics."""

    latitude: float = Field(..., description="Degrees north", ge=-90.0, le=90.0)
    longitude: float = Field(..., description="Degrees east", ge=-180.0, le=180.0)
    method: str | None = Field(None, description="Calculation method id or name")
    school: str | None = Field(None, description="Asr juristic school id or name")
    days: int | None = Field(
        None,
        description="Number of days to export, starting today at the location",
        ge=1,
    )
    discreet: bool = Field(
        False,
        description="Use neutral 'Personal Time' wording for shared work calendars",
    )
