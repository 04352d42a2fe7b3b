"""Activity log: the bounded, newest-first feed of status changes."""

import logging
from typing import Any

from pvtrack.domain.activity import ActivityEntry, prepend_bounded
from pvtrack.interfaces.kv_store import KeyValueStore, KeyValueStoreError

from . import wire
from .keys import RECENT_ACTIVITY_KEY
from .persistence import fetch_json, read_json, write_json

logger = logging.getLogger(__name__)


class ActivityLog:
    """Append-only log of the most recent ``limit`` status changes."""

    def __init__(self, store: KeyValueStore, limit: int) -> None:
        self._store = store
        self.limit = limit

    async def append(self, entry: ActivityEntry) -> list[ActivityEntry] | None:
        """Prepend ``entry`` and keep the newest ``limit`` entries.

        A failed write is logged only; it never undoes anything written
        before it. If the stored log cannot be read, ``entry`` is dropped,
        the log is left as it is, and None is returned.
        """
        try:
            stored = self._decode(await fetch_json(self._store, RECENT_ACTIVITY_KEY))
        except KeyValueStoreError:
            logger.exception(
                "Failed to read %s; not recording %s %s",
                RECENT_ACTIVITY_KEY,
                entry.unit_id,
                entry.test_id,
            )
            return None
        entries = prepend_bounded(stored, entry, self.limit)
        await write_json(
            self._store,
            RECENT_ACTIVITY_KEY,
            [wire.activity_to_wire(e) for e in entries],
        )
        return entries

    async def load(self) -> list[ActivityEntry]:
        """Return the stored entries, newest first; unreadable entries are skipped."""
        return self._decode(await read_json(self._store, RECENT_ACTIVITY_KEY))

    def _decode(self, data: Any) -> list[ActivityEntry]:
        if data is None:
            return []
        if not isinstance(data, list):
            logger.error("Stored %s is not a list, starting afresh", RECENT_ACTIVITY_KEY)
            return []
        entries = []
        for item in data:
            try:
                entries.append(wire.activity_from_wire(item))
            except wire.MappingError as e:
                logger.warning("Skipping unreadable activity entry: %s", e)
        return entries[: self.limit]
