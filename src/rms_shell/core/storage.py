"""Key-value storage scopes modeled on the Web Storage API."""
from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Synchronous string key-value store.

    Implementations must not raise on backend outages: reads return None and
    writes return False instead, so callers can treat an unavailable store as
    a cache miss or a no-op write.
    """

    def get_item(self, key: str) -> str | None:
        """Return the stored value or None."""
        ...

    def set_item(self, key: str, value: str) -> bool:
        """Store value, returns False if the write did not happen."""
        ...

    def remove_item(self, key: str) -> bool:
        """Remove key, returns False if the store is unavailable."""
        ...


class MemoryStore:
    """Dict-backed store that lives as long as the process (the session scope)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> bool:
        self._items[key] = value
        return True

    def remove_item(self, key: str) -> bool:
        self._items.pop(key, None)
        return True

    def keys(self) -> list[str]:
        return list(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)
