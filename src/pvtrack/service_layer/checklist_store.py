"""Checklist store: the canonical per-test status list of each unit."""

import logging
from typing import Any

from pvtrack.domain.checklist import Checklist, ChecklistTemplate
from pvtrack.interfaces.kv_store import KeyValueStore, KeyValueStoreError

from . import wire
from .keys import checklist_key
from .persistence import fetch_json, read_json, write_json

logger = logging.getLogger(__name__)


class ChecklistStore:
    """Reads and writes unit checklists.

    A unit that has never been written reads as the template checklist with
    every test not started. Stored checklists are always projected back onto
    the template, so the set of test ids a caller sees is exactly the
    template's.
    """

    def __init__(self, store: KeyValueStore, template: ChecklistTemplate) -> None:
        self._store = store
        self.template = template

    async def load(self, unit_id: str) -> Checklist:
        """Return the checklist of ``unit_id``; never raises."""
        return self._decode(unit_id, await read_json(self._store, checklist_key(unit_id)))

    async def save(self, checklist: Checklist) -> bool:
        """Write the full checklist back; False if the write failed."""
        return await write_json(
            self._store,
            checklist_key(checklist.unit_id),
            wire.checklist_to_wire(checklist),
        )

    async def toggle(self, unit_id: str, test_id: str) -> Checklist | None:
        """Advance ``test_id`` one step along the status cycle and save.

        An unknown ``test_id`` is a no-op: the current checklist is returned
        and nothing is written. If the stored checklist cannot be read, nothing
        is written and None is returned.
        """
        key = checklist_key(unit_id)
        try:
            data = await fetch_json(self._store, key)
        except KeyValueStoreError:
            logger.exception("Failed to read %s; not toggling %s", key, test_id)
            return None
        checklist = self._decode(unit_id, data)
        updated = checklist.toggled(test_id)
        if updated is checklist:
            logger.info("Unit %s has no test %s; nothing to toggle", unit_id, test_id)
            return checklist
        await self.save(updated)
        return updated

    def _decode(self, unit_id: str, data: Any) -> Checklist:
        if data is None:
            return self.template.build(unit_id)
        try:
            statuses = wire.checklist_statuses_from_wire(data)
        except wire.MappingError as e:
            logger.error(
                "Stored checklist of unit %s is unreadable, using defaults: %s",
                unit_id,
                e,
            )
            return self.template.build(unit_id)
        if unknown := set(statuses) - set(self.template.test_ids):
            logger.warning(
                "Ignoring tests unknown to the template in unit %s: %s",
                unit_id,
                sorted(unknown),
            )
        return self.template.reconcile(unit_id, statuses)
