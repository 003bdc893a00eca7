"""File implementation of KeyValueStore.

One file per key inside a cache directory. File names are the md5 of the
key, so keys may contain any characters.
"""

import hashlib
import logging
import os
from pathlib import Path

from prayersync.config import Settings, settings
from prayersync.errors import DurableStoreError

logger = logging.getLogger(__name__)


class FileKeyValueStore:
    """Directory-backed implementation of the KeyValueStore protocol."""

    def __init__(self, cache_dir: str | os.PathLike | None = None) -> None:
        """Initialize the file store.

        Args:
            cache_dir: Directory holding the entries. Created if missing.
        """
        self._cache_dir = Path(os.path.expanduser(str(cache_dir or settings.cache_dir)))
        self._cache_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def create(cls, config: Settings | None = None) -> "FileKeyValueStore":
        config = config or settings
        return cls(cache_dir=config.cache_dir)

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def _path(self, key: str) -> Path:
        key_hash = hashlib.md5(key.encode()).hexdigest()
        return self._cache_dir / f"{key_hash}.json"

    async def get(self, key: str) -> bytes | None:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise DurableStoreError(f"Error reading cache file {path}: {e}") from e

    async def set(self, key: str, value: bytes) -> bool:
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        try:
            tmp_path.write_bytes(value)
            tmp_path.replace(path)
            return True
        except OSError as e:
            logger.warning(f"Error saving cache file {path}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        try:
            self._path(key).unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Error deleting cache file for {key}: {e}")
            return False

    async def health_check(self) -> bool:
        return self._cache_dir.is_dir() and os.access(self._cache_dir, os.W_OK)
