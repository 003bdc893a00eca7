import logging
import os
import sys
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"

DURABLE_BACKENDS = ("redis", "file", "memory")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Upstream timings provider
    aladhan_base_url: str = os.getenv("ALADHAN_BASE_URL", "https://api.aladhan.com/v1")
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "10.0"))
    user_agent: str = os.getenv("USER_AGENT", "PrayerSync/1.0 (prayersync.app)")
    default_method: int = int(os.getenv("DEFAULT_METHOD", "3"))  # Muslim World League
    default_school: int = int(os.getenv("DEFAULT_SCHOOL", "0"))  # Standard Asr

    # Cache
    time_data_ttl: int = int(os.getenv("TIME_DATA_TTL", "86400"))  # 24 hours
    # Zone identifiers are permanent facts about a location: never expire
    metadata_ttl: int | None = None
    coordinate_precision: int = int(os.getenv("COORDINATE_PRECISION", "4"))

    # Durable store
    durable_backend: str = os.getenv("DURABLE_BACKEND", "redis")
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "prayersync")
    cache_dir: str = os.getenv("CACHE_DIR", "~/.cache/prayersync")

    # Calendar export
    event_duration_minutes: int = int(os.getenv("EVENT_DURATION_MINUTES", "30"))
    alarm_offset_minutes: int = int(os.getenv("ALARM_OFFSET_MINUTES", "15"))
    default_export_days: int = int(os.getenv("DEFAULT_EXPORT_DAYS", "30"))
    max_export_days: int = int(os.getenv("MAX_EXPORT_DAYS", "366"))
    uid_domain: str = os.getenv("UID_DOMAIN", "prayersync.app")
    calendar_name: str = os.getenv("CALENDAR_NAME", "Prayer Times - PrayerSync")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.upstream_timeout <= 0:
            raise ValueError("UPSTREAM_TIMEOUT must be positive")

        if self.default_school not in (0, 1):
            raise ValueError("DEFAULT_SCHOOL must be 0 (Standard) or 1 (Hanafi)")

        if self.time_data_ttl <= 0:
            raise ValueError("TIME_DATA_TTL must be positive")

        if not 0 <= self.coordinate_precision <= 8:
            raise ValueError("COORDINATE_PRECISION must be between 0 and 8")

        if self.durable_backend not in DURABLE_BACKENDS:
            raise ValueError(
                f"DURABLE_BACKEND must be one of {list(DURABLE_BACKENDS)}, "
                f"got {self.durable_backend!r}"
            )

        if self.event_duration_minutes <= 0:
            raise ValueError("EVENT_DURATION_MINUTES must be positive")

        if self.alarm_offset_minutes < 0:
            raise ValueError("ALARM_OFFSET_MINUTES cannot be negative")

        if not 1 <= self.default_export_days <= self.max_export_days:
            raise ValueError("DEFAULT_EXPORT_DAYS must be between 1 and MAX_EXPORT_DAYS")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(config: Settings | None = None) -> redis.Redis:
    """Create an async Redis client instance."""
    config = config or settings
    return redis.from_url(
        config.redis_url,
        password=config.redis_password,
        decode_responses=False,
    )


def configure_logging(level: str | None = None) -> None:
    """Install a stdout handler on the root logger if none exists."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)
    root_logger.setLevel((level or settings.log_level).upper())
