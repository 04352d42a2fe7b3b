"""Unit aggregator: per-unit completion summaries."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pvtrack.domain.checklist import Checklist
from pvtrack.domain.progress import UnitSummary, summarize
from pvtrack.interfaces.clock import Clock
from pvtrack.interfaces.kv_store import KeyValueStore, KeyValueStoreError

from . import wire
from .keys import UNITS_DATA_KEY, progress_key
from .persistence import fetch_json, read_json, write_json

logger = logging.getLogger(__name__)


class UnitAggregator:
    """Derives unit summaries from checklists and persists them.

    Each summary is written twice: as the standalone percentage under
    ``pv-<unit>-progress`` and as the unit's entry in the shared
    ``pvUnitsData`` map, which is what the global rollup enumerates.
    """

    def __init__(self, store: KeyValueStore, clock: Clock) -> None:
        self._store = store
        self._clock = clock

    def recompute(self, unit_id: str, checklist: Checklist) -> UnitSummary:
        """Derive the summary of ``unit_id`` from its checklist.

        Raises:
            ValueError: If ``checklist`` belongs to another unit.
        """
        if checklist.unit_id != unit_id:
            raise ValueError(
                f"Checklist of unit {checklist.unit_id} passed for unit {unit_id}"
            )
        return summarize(checklist, at=self._clock.now())

    async def persist(self, summary: UnitSummary) -> dict[str, UnitSummary] | None:
        """Write ``summary`` and return the per-unit map it was merged into.

        The map is re-read from the store, patched with ``summary`` and
        written back whole. The returned map reflects the patch even when the
        write failed. If the map itself cannot be read, it is left untouched
        and None is returned; only the standalone percentage is written.
        """
        await write_json(
            self._store,
            progress_key(summary.unit_id),
            summary.completion_percentage,
        )
        try:
            units = self._decode_map(await fetch_json(self._store, UNITS_DATA_KEY))
        except KeyValueStoreError:
            logger.exception(
                "Failed to read %s; leaving it unchanged for unit %s",
                UNITS_DATA_KEY,
                summary.unit_id,
            )
            return None
        units[summary.unit_id] = summary
        await self._write_map(units)
        logger.debug(
            "Unit %s at %d%% (%s)",
            summary.unit_id,
            summary.completion_percentage,
            summary.status.value,
        )
        return units

    async def persist_all(
        self, summaries: Iterable[UnitSummary]
    ) -> dict[str, UnitSummary]:
        """Replace the per-unit map with ``summaries`` and rewrite every scalar."""
        units = {summary.unit_id: summary for summary in summaries}
        for summary in units.values():
            await write_json(
                self._store,
                progress_key(summary.unit_id),
                summary.completion_percentage,
            )
        await self._write_map(units)
        return units

    async def load_all(self) -> dict[str, UnitSummary]:
        """Read the per-unit map; unreadable entries are skipped."""
        return self._decode_map(await read_json(self._store, UNITS_DATA_KEY))

    async def load(self, unit_id: str) -> UnitSummary | None:
        """Return the stored summary of ``unit_id``, or None."""
        return (await self.load_all()).get(unit_id)

    async def load_percentage(self, unit_id: str) -> int | None:
        """Return the standalone stored percentage of ``unit_id``, or None."""
        data = await read_json(self._store, progress_key(unit_id))
        if data is None:
            return None
        try:
            return wire.percentage_from_wire(data)
        except wire.MappingError as e:
            logger.warning("Ignoring unreadable progress of unit %s: %s", unit_id, e)
            return None

    @staticmethod
    def _decode_map(data: Any) -> dict[str, UnitSummary]:
        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.error(
                "Stored %s is not an object, treating every unit as not started",
                UNITS_DATA_KEY,
            )
            return {}
        units: dict[str, UnitSummary] = {}
        for unit_id, entry in data.items():
            try:
                units[unit_id] = wire.summary_from_wire(unit_id, entry)
            except wire.MappingError as e:
                logger.warning("Skipping unreadable summary of unit %s: %s", unit_id, e)
        return units

    async def _write_map(self, units: dict[str, UnitSummary]) -> bool:
        return await write_json(
            self._store,
            UNITS_DATA_KEY,
            {unit_id: wire.summary_to_wire(s) for unit_id, s in sorted(units.items())},
        )
