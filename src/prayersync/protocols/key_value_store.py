"""Durable key/value store protocol.

Defines the byte-store the engine uses to keep cache entries across
sessions. The engine is agnostic to what sits behind it.

Implementations can include:
- Redis (default)
- JSON files in a cache directory
- In-process dictionary (tests, single-run scripts)
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for durable byte-stores.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed.
    """

    async def get(self, key: str) -> bytes | None:
        """Read a value.

        Args:
            key: The storage key

        Returns:
            The stored bytes, or None if absent

        Raises:
            DurableStoreError: If the store cannot be read
        """
        ...

    async def set(self, key: str, value: bytes) -> bool:
        """Write a value.

        Args:
            key: The storage key
            value: Bytes to store

        Returns:
            True on success, False on failure
        """
        ...

    async def delete(self, key: str) -> bool:
        """Remove a value.

        Args:
            key: The storage key

        Returns:
            True if something was deleted
        """
        ...

    async def health_check(self) -> bool:
        """Check if the store is accessible."""
        ...
