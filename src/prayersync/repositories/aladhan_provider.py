"""AlAdhan-based timings provider.

Uses the public AlAdhan API (https://aladhan.com/prayer-times-api) to fetch
one day of prayer timings for a location:

    GET {base_url}/timings/{DD-MM-YYYY}?latitude=..&longitude=..&method=..

A successful response looks like:

    {
        "code": 200,
        "data": {
            "timings": {"Fajr": "05:42", "Sunrise": "07:10", ...},
            "meta": {"timezone": "Europe/London", ...}
        }
    }
"""

import logging
from datetime import date, datetime, timezone
from typing import Any

import httpx

from prayersync.config import Settings, settings
from prayersync.entities import Coordinate, TimingsPayload
from prayersync.errors import InvalidUpstreamPayload, MetadataMissing, UpstreamUnavailable
from prayersync.methods import AsrSchool, CalculationMethod

logger = logging.getLogger(__name__)


class AladhanTimingsProvider:
    """AlAdhan implementation of the TimingsProvider protocol.

    This class satisfies the TimingsProvider protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        provider = AladhanTimingsProvider.create()
        payload = await provider.fetch_timings(
            date(2025, 6, 13), Coordinate(51.5074, -0.1278), CalculationMethod.MWL
        )
        print(payload.timezone)  # Europe/London
        ```
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the AlAdhan provider.

        Args:
            base_url: API base URL. Defaults to settings.aladhan_base_url.
            timeout: Request timeout in seconds. Defaults to settings.upstream_timeout.
            user_agent: User-Agent header value. Defaults to settings.user_agent.
            client: Pre-built async client (tests inject one with a mock transport).
        """
        self._base_url = (base_url or settings.aladhan_base_url).rstrip("/")
        self._timeout = timeout or settings.upstream_timeout
        self._user_agent = user_agent or settings.user_agent
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            )
        return self._client

    @classmethod
    def create(cls, config: Settings | None = None) -> "AladhanTimingsProvider":
        """Factory method to create AladhanTimingsProvider from settings.

        Args:
            config: Settings to read from. If None, uses global settings.

        Returns:
            Configured AladhanTimingsProvider
        """
        config = config or settings
        return cls(
            base_url=config.aladhan_base_url,
            timeout=config.upstream_timeout,
            user_agent=config.user_agent,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

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
            method: Calculation method (sent as its integer id)
            school: Asr juristic school (sent as its integer id)

        Returns:
            TimingsPayload with raw timings and the zone identifier

        Raises:
            UpstreamUnavailable: Transport error, timeout or non-2xx status
            InvalidUpstreamPayload: Body is not JSON or has no timings
            MetadataMissing: Body has no meta.timezone
        """
        url = f"{self._base_url}/timings/{civil_date.strftime('%d-%m-%Y')}"
        params = {
            "latitude": coordinate.latitude,
            "longitude": coordinate.longitude,
            "method": int(method),
            "school": int(school),
        }

        logger.info(f"Fetching prayer times from {url} with params {params}")
        try:
            response = await self.client.get(
                url,
                params=params,
                headers={"User-Agent": self._user_agent},
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            raise UpstreamUnavailable(f"AlAdhan request timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"AlAdhan request failed: {e}") from e

        if not response.is_success:
            raise UpstreamUnavailable(
                f"AlAdhan API error: {response.status_code} {response.reason_phrase}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise InvalidUpstreamPayload("AlAdhan response is not valid JSON") from e

        return self._parse_payload(body)

    @staticmethod
    def _parse_payload(body: Any) -> TimingsPayload:
        """Validate the response structure and reduce it to a TimingsPayload."""
        if not isinstance(body, dict) or body.get("code") != 200:
            code = body.get("code") if isinstance(body, dict) else None
            raise InvalidUpstreamPayload(f"Unexpected AlAdhan response code: {code!r}")

        data = body.get("data")
        if not isinstance(data, dict):
            raise InvalidUpstreamPayload("AlAdhan response has no data object")

        timings = data.get("timings")
        if not isinstance(timings, dict) or not timings:
            raise InvalidUpstreamPayload("AlAdhan response has no timings")

        meta = data.get("meta")
        zone = meta.get("timezone") if isinstance(meta, dict) else None
        if not isinstance(zone, str) or not zone:
            raise MetadataMissing("AlAdhan response has no timezone metadata")

        return TimingsPayload(
            timings={str(k): v for k, v in timings.items()},
            timezone=zone,
            raw_meta={k: v for k, v in meta.items() if k != "timezone"},
        )

    async def is_available(self) -> bool:
        """Check if the AlAdhan API answers a minimal request.

        Returns:
            True if a timings request for Mecca succeeds, False otherwise
        """
        try:
            await self.fetch_timings(
                datetime.now(timezone.utc).date(),
                Coordinate(21.4225, 39.8262),
                CalculationMethod.MAKKAH,
            )
            return True
        except UpstreamUnavailable:
            return False

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
