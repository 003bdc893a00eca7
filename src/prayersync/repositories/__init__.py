"""Repository layer for data access.

This layer abstracts external dependencies (Redis, the filesystem, the
AlAdhan API) behind protocol-based interfaces, and provides the concrete
cache tiers built on top of them.

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from prayersync.config import Settings, settings
from prayersync.protocols import CacheTier, KeyValueStore, TimingsProvider

from .aladhan_provider import AladhanTimingsProvider
from .entry_codec import EntryDecodeError, decode_entry, encode_entry
from .file_store import FileKeyValueStore
from .memory_store import InMemoryKeyValueStore
from .redis_store import RedisKeyValueStore
from .tiers import DurableTier, UpstreamTier, VolatileTier


def create_durable_store(config: Settings | None = None) -> KeyValueStore:
    """Build the durable store selected by settings.durable_backend."""
    config = config or settings
    if config.durable_backend == "redis":
        return RedisKeyValueStore.create(config)
    if config.durable_backend == "file":
        return FileKeyValueStore.create(config)
    return InMemoryKeyValueStore()


__all__ = [
    "CacheTier",
    "KeyValueStore",
    "TimingsProvider",
    "AladhanTimingsProvider",
    "RedisKeyValueStore",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "VolatileTier",
    "DurableTier",
    "UpstreamTier",
    "EntryDecodeError",
    "encode_entry",
    "decode_entry",
    "create_durable_store",
]
