"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import CalendarQuery, PrayerTimesQuery
from .responses import HealthCheckResponse, PrayerTimesResponse

__all__ = [
    "PrayerTimesQuery",
    "CalendarQuery",
    "PrayerTimesResponse",
    "HealthCheckResponse",
]
