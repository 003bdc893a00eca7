"""Response DTOs for API endpoints."""

import datetime as dt

from pydantic import BaseModel, Field


class PrayerTimesResponse(BaseModel):
    """Response DTO for one day of prayer times."""

    latitude: float = Field(..., description="Requested latitude")
    longitude: float = Field(..., description="Requested longitude")
    date: dt.date = Field(..., description="Date in the location's calendar")
    timezone: str | None = Field(
        None,
        description="IANA zone of the location, null if it could not be resolved",
    )
    method: int = Field(..., description="Calculation method id")
    method_name: str = Field(..., description="Authority behind the calculation method")
    school: int = Field(..., description="Asr juristic school id (0 standard, 1 Hanafi)")
    times: dict[str, str] = Field(
        ...,
        description="Local clock times keyed by prayer name (Fajr, Sunrise, Dhuhr, Asr, Maghrib, Isha)",
    )
    is_fallback: bool = Field(
        ...,
        description="True when the times are the static offline default, not real data",
    )


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'degraded'")
    store_healthy: bool = Field(..., description="Whether the durable store is reachable")
    upstream_healthy: bool = Field(..., description="Whether the timings provider answers")
