"""In-memory key-value store backend.

This module provides a tiny, dependency-free store meant for **tests**,
examples, and local development. Values are kept entirely in RAM; there is no
persistence across process restarts.

Typical usage
-------------
    store = MemoryKeyValueStore()
    await store.set_item("overallProgress", "{}")
    value = await store.get_item("overallProgress")  # "{}"
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pvtrack.interfaces.kv_store import KeyValueStore

__all__ = ["MemoryKeyValueStore"]


class MemoryKeyValueStore(KeyValueStore):
    """Key-value store backed by a plain dict.

    Args:
        initial: Optional items to seed the store with (copied).
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        self.validate_key(key)
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.validate_key(key)
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self.validate_key(key)
        self._items.pop(key, None)

    async def keys(self) -> Iterable[str]:
        return list(self._items)

    def snapshot(self) -> dict[str, str]:
        """Return a copy of every stored item (test helper)."""
        return dict(self._items)
