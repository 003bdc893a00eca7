"""Timings provider protocol.

Defines the interface for the upstream service that returns prayer timings
for a date and location.

Implementations can include:
- AlAdhan HTTP API (default)
- Scripted fakes for tests
"""

from datetime import date
from typing import Protocol, runtime_checkable

from prayersync.entities import Coordinate, TimingsPayload
from prayersync.methods import AsrSchool, CalculationMethod


@runtime_checkable
class TimingsProvider(Protocol):
    """Protocol for upstream timings providers."""

    async def fetch_timings(
        self,
        civil_date: date,
        coordinate: Coordinate,
        method: CalculationMethod,
        school: AsrSchool = AsrSchool.STANDARD,
    ) -> TimingsPayload:
        """Fetch one day of timings.

        Args:
            civil_date: Date in the location's calendar
            coordinate: Location
            method: Calculation method
            school: Asr juristic school

        Returns:
            The timings and zone metadata

        Raises:
            UpstreamUnavailable: On transport failure, timeout or non-success status
            InvalidUpstreamPayload: If the response lacks timings
            MetadataMissing: If the response lacks the zone identifier
        """
        ...

    async def is_available(self) -> bool:
        """Check if the provider is reachable."""
        ...
