"""Global rollup: fleet-wide completion counts."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from pvtrack.domain.progress import GlobalRollup, UnitSummary, rollup
from pvtrack.domain.unit_ids import unit_ids
from pvtrack.interfaces.kv_store import KeyValueStore

from . import wire
from .keys import OVERALL_PROGRESS_KEY
from .persistence import read_json, write_json
from .unit_aggregator import UnitAggregator

logger = logging.getLogger(__name__)


class GlobalRollupService:
    """Recomputes and persists the fleet-wide rollup.

    The rollup is always re-derived from the complete per-unit map. Counters
    are never patched incrementally, so a missed update is repaired by the
    next recompute instead of drifting.
    """

    def __init__(
        self, store: KeyValueStore, units: UnitAggregator, total_units: int
    ) -> None:
        self._store = store
        self._units = units
        self.total_units = total_units

    def recompute(
        self, summaries: Mapping[str, UnitSummary], total_units: int | None = None
    ) -> GlobalRollup:
        """Derive the rollup of units ``01..total_units`` from ``summaries``."""
        if total_units is None:
            total_units = self.total_units
        return rollup(summaries, unit_ids(total_units))

    async def persist(self, result: GlobalRollup) -> bool:
        """Write ``result``; False if the write failed."""
        return await write_json(
            self._store, OVERALL_PROGRESS_KEY, wire.rollup_to_wire(result)
        )

    async def refresh(
        self, summaries: Mapping[str, UnitSummary] | None = None
    ) -> GlobalRollup:
        """Recompute from ``summaries`` (or a fresh read of them) and persist."""
        if summaries is None:
            summaries = await self._units.load_all()
        result = self.recompute(summaries)
        await self.persist(result)
        logger.debug(
            "Fleet rollup: %d/%d completed, %d in progress, %d not started",
            result.completed_units,
            result.total_units,
            result.in_progress_units,
            result.not_started_units,
        )
        return result

    async def load(self) -> GlobalRollup:
        """Return the stored rollup, or the all-not-started default."""
        data = await read_json(self._store, OVERALL_PROGRESS_KEY)
        if data is None:
            return GlobalRollup.empty(self.total_units)
        try:
            return wire.rollup_from_wire(data)
        except wire.MappingError as e:
            logger.error("Stored %s is unreadable: %s", OVERALL_PROGRESS_KEY, e)
            return GlobalRollup.empty(self.total_units)
