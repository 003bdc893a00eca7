"""Error taxonomy for prayer-time resolution and calendar export.

Upstream and durable-store errors are recovered inside the tiered cache by
falling through to the next tier or to fallback data. Conversion errors
(InvalidTimeString, UnknownTimezone) are contract violations and propagate.
"""

from enum import Enum


class ErrorCode(Enum):
    """Error codes."""

    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    INVALID_UPSTREAM_PAYLOAD = "INVALID_UPSTREAM_PAYLOAD"
    METADATA_MISSING = "METADATA_MISSING"
    ALL_TIERS_EXHAUSTED = "ALL_TIERS_EXHAUSTED"
    DURABLE_STORE_ERROR = "DURABLE_STORE_ERROR"
    INVALID_TIME_STRING = "INVALID_TIME_STRING"
    UNKNOWN_TIMEZONE = "UNKNOWN_TIMEZONE"


class PrayerSyncError(Exception):
    """Base error with code and message."""

    code: ErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class UpstreamUnavailable(PrayerSyncError):
    """Raised when the timings provider cannot be reached (transport, timeout, status)."""

    code = ErrorCode.UPSTREAM_UNAVAILABLE


class InvalidUpstreamPayload(UpstreamUnavailable):
    """Raised when the provider answered but the payload is missing required fields.

    Recovered exactly like UpstreamUnavailable, but it usually means the
    provider contract changed, so it is logged at error level.
    """

    code = ErrorCode.INVALID_UPSTREAM_PAYLOAD


class MetadataMissing(InvalidUpstreamPayload):
    """Raised when a provider response carries no timezone identifier."""

    code = ErrorCode.METADATA_MISSING


class AllTiersExhausted(PrayerSyncError):
    """Raised when no cache tier could supply prayer times."""

    code = ErrorCode.ALL_TIERS_EXHAUSTED

    def __init__(self, cache_key: str) -> None:
        super().__init__(f"No tier could supply prayer times for {cache_key}")
        self.cache_key = cache_key


class DurableStoreError(PrayerSyncError):
    """Raised when the durable key/value store fails to read."""

    code = ErrorCode.DURABLE_STORE_ERROR


class InvalidTimeString(PrayerSyncError):
    """Raised when a local time of day cannot be parsed as HH:MM[:SS]."""

    code = ErrorCode.INVALID_TIME_STRING

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid time of day: {value!r}")
        self.value = value


class UnknownTimezone(PrayerSyncError):
    """Raised when an IANA zone identifier cannot be resolved."""

    code = ErrorCode.UNKNOWN_TIMEZONE

    def __init__(self, timezone: object) -> None:
        super().__init__(f"Unknown timezone: {timezone!r}")
        self.timezone = timezone
