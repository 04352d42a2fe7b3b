"""Read-only query facade consumed by the presentation layer.

Every query has a defined fallback when nothing is stored yet, so absence of
data is a normal state rather than an error. Queries have no side effects and
may be polled at any time.
"""

from __future__ import annotations

from dataclasses import dataclass

from pvtrack.domain.activity import ActivityEntry
from pvtrack.domain.checklist import Checklist
from pvtrack.domain.progress import GlobalRollup, UnitSummary, status_for_percentage
from pvtrack.domain.unit_ids import unit_ids, unit_label
from pvtrack.domain.value_objects import Status

from .activity_log import ActivityLog
from .checklist_store import ChecklistStore
from .global_rollup import GlobalRollupService
from .unit_aggregator import UnitAggregator


@dataclass(frozen=True, slots=True)
class UnitOverview:
    """One row of the unit list.

    ``completed_test_count`` is None when only the standalone percentage is
    stored for the unit; it is never derived from the percentage.
    """

    unit_id: str
    label: str
    completion_percentage: int
    status: Status
    completed_test_count: int | None


class QueryFacade:
    """Read-only views over the persisted progress state."""

    def __init__(
        self,
        checklists: ChecklistStore,
        units: UnitAggregator,
        rollups: GlobalRollupService,
        activity: ActivityLog,
    ) -> None:
        self._checklists = checklists
        self._units = units
        self._rollups = rollups
        self._activity = activity

    async def checklist(self, unit_id: str) -> Checklist:
        """Checklist of ``unit_id`` (the default one if never written)."""
        return await self._checklists.load(unit_id)

    async def unit_summary(self, unit_id: str) -> UnitSummary:
        """Stored summary of ``unit_id``, or a zeroed one."""
        if summary := await self._units.load(unit_id):
            return summary
        return UnitSummary.empty(unit_id, len(self._checklists.template))

    async def unit_percentage(self, unit_id: str) -> int:
        """Completion percentage of ``unit_id``.

        Reads the per-unit map first, then the standalone percentage, and
        falls back to 0.
        """
        if summary := await self._units.load(unit_id):
            return summary.completion_percentage
        percentage = await self._units.load_percentage(unit_id)
        return percentage if percentage is not None else 0

    async def list_units(self) -> list[UnitOverview]:
        """Overview of every configured unit, in id order."""
        summaries = await self._units.load_all()
        overviews = []
        for unit_id in unit_ids(self._rollups.total_units):
            if summary := summaries.get(unit_id):
                percentage = summary.completion_percentage
                completed: int | None = summary.completed_test_count
            else:
                stored = await self._units.load_percentage(unit_id)
                percentage = stored if stored is not None else 0
                completed = None if stored else 0
            overviews.append(
                UnitOverview(
                    unit_id=unit_id,
                    label=unit_label(unit_id),
                    completion_percentage=percentage,
                    status=status_for_percentage(percentage),
                    completed_test_count=completed,
                )
            )
        return overviews

    async def global_rollup(self) -> GlobalRollup:
        """Stored fleet-wide rollup, or the all-not-started default."""
        return await self._rollups.load()

    async def recent_activity(self) -> list[ActivityEntry]:
        """Recent status changes, newest first; empty if none."""
        return await self._activity.load()
