"""Command handlers.

The toggle handler is the single mutation entry point. It runs the write
chain strictly in order, awaiting each step before the next because later
steps read what earlier ones wrote:

1. checklist store write
2. unit summary recompute, written as the scalar and into the per-unit map
3. fleet rollup recompute from the full per-unit map
4. activity log append

There is no rollback. A failed write is logged by the step that hit it and
the chain carries on with the in-memory state; the stale key is overwritten
by the next mutation or by `RebuildRollups`. A read that fails is never
written back as empty: an unreadable checklist stops the toggle before any
write, and an unreadable per-unit map or activity log is left as stored along
with the rollup derived from the map.
"""

import logging
from collections.abc import Callable

from pvtrack.domain.activity import ActivityEntry
from pvtrack.domain.checklist import Checklist
from pvtrack.domain.progress import GlobalRollup
from pvtrack.domain.unit_ids import unit_ids

from . import commands
from .activity_log import ActivityLog
from .checklist_store import ChecklistStore
from .global_rollup import GlobalRollupService
from .unit_aggregator import UnitAggregator

logger = logging.getLogger(__name__)


async def toggle_test_status(
    cmd: commands.ToggleTestStatus,
    checklists: ChecklistStore,
    units: UnitAggregator,
    rollups: GlobalRollupService,
    activity: ActivityLog,
) -> Checklist | None:
    """Advance one test and bring every rollup up to date.

    Unknown units and unknown tests are no-ops: nothing is written and the
    current checklist is returned. None means the unit's checklist could not
    be read, so nothing was written at all.
    """
    if cmd.unit_id not in unit_ids(rollups.total_units):
        logger.warning("Unit %s is not part of the train; ignoring toggle", cmd.unit_id)
        return checklists.template.build(cmd.unit_id)

    checklist = await checklists.toggle(cmd.unit_id, cmd.test_id)
    if checklist is None or (record := checklist.get(cmd.test_id)) is None:
        return checklist

    summary = units.recompute(cmd.unit_id, checklist)
    # recompute always stamps the summary
    assert summary.last_updated is not None
    all_units = await units.persist(summary)
    if all_units is None:
        logger.warning(
            "Fleet rollup left as stored; run a rebuild once the store is readable"
        )
    else:
        await rollups.refresh(all_units)
    await activity.append(
        ActivityEntry(
            unit_id=cmd.unit_id,
            test_id=record.id,
            new_status=record.status,
            timestamp=summary.last_updated,
        )
    )
    logger.info(
        "Unit %s test %s is now %s (unit at %d%%)",
        cmd.unit_id,
        record.id,
        record.status.value,
        summary.completion_percentage,
    )
    return checklist


async def rebuild_rollups(
    cmd: commands.RebuildRollups,  # pylint: disable=unused-argument
    checklists: ChecklistStore,
    units: UnitAggregator,
    rollups: GlobalRollupService,
) -> GlobalRollup:
    """Re-derive every unit summary from its checklist, then the fleet rollup."""
    summaries = []
    for unit_id in unit_ids(rollups.total_units):
        checklist = await checklists.load(unit_id)
        summaries.append(units.recompute(unit_id, checklist))
    all_units = await units.persist_all(summaries)
    result = await rollups.refresh(all_units)
    logger.info(
        "Rebuilt rollups for %d units: %d%% complete",
        result.total_units,
        result.overall_percentage,
    )
    return result


COMMAND_HANDLERS: dict[type, Callable[..., object]] = {
    commands.ToggleTestStatus: toggle_test_status,
    commands.RebuildRollups: rebuild_rollups,
}
