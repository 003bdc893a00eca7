"""In-memory implementation of KeyValueStore.

Lives only as long as the process. Used by tests and by one-shot exports
that have no durable backend configured.
"""


class InMemoryKeyValueStore:
    """Dictionary-backed implementation of the KeyValueStore protocol."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    async def set(self, key: str, value: bytes) -> bool:
        self._data[key] = bytes(value)
        return True

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    async def health_check(self) -> bool:
        return True

    def keys(self) -> list[str]:
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)
