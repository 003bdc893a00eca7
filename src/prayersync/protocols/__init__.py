"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis → files, AlAdhan → fakes, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from prayersync.protocols import KeyValueStore, TimingsProvider

    store: KeyValueStore = RedisKeyValueStore.create()  # works
    store: KeyValueStore = FileKeyValueStore.create()   # also works
    ```
"""

from .cache_tier import CacheTier
from .key_value_store import KeyValueStore
from .timings_provider import TimingsProvider

__all__ = [
    "CacheTier",
    "KeyValueStore",
    "TimingsProvider",
]
