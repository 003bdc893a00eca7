"""Byte serialization of cache entries for durable stores.

Format (UTF-8 JSON):

    {"kind": "times", "created_at": 1749790800.0,
     "data": {"Fajr": "05:42", ...}, "fallback": false}

    {"kind": "timezone", "created_at": 1749790800.0, "data": "Europe/London"}
"""

import json

from prayersync.entities import CacheEntry, PrayerTimeSet

KIND_TIMES = "times"
KIND_TIMEZONE = "timezone"


class EntryDecodeError(ValueError):
    """Raised when stored bytes are not a valid cache entry."""


def encode_entry(entry: CacheEntry) -> bytes:
    """Serialize a cache entry."""
    if isinstance(entry.value, PrayerTimeSet):
        payload = {
            "kind": KIND_TIMES,
            "created_at": entry.created_at,
            "data": entry.value.to_dict(),
            "fallback": entry.value.is_fallback,
        }
    else:
        payload = {
            "kind": KIND_TIMEZONE,
            "created_at": entry.created_at,
            "data": entry.value,
        }
    return json.dumps(payload, sort_keys=True).encode("utf-8")


def decode_entry(raw: bytes) -> CacheEntry:
    """Deserialize a cache entry.

    Raises:
        EntryDecodeError: If the bytes are not a well-formed entry
    """
    try:
        payload = json.loads(raw.decode("utf-8"))
        kind = payload["kind"]
        created_at = float(payload["created_at"])
        data = payload["data"]
        if kind == KIND_TIMES:
            value = PrayerTimeSet.from_dict(data, is_fallback=bool(payload.get("fallback", False)))
        elif kind == KIND_TIMEZONE:
            if not isinstance(data, str) or not data:
                raise ValueError("timezone entry without zone id")
            value = data
        else:
            raise ValueError(f"unknown entry kind {kind!r}")
    except (UnicodeDecodeError, KeyError, TypeError, AttributeError, ValueError) as e:
        raise EntryDecodeError(f"Corrupt cache entry: {e}") from e
    return CacheEntry(value=value, created_at=created_at)
