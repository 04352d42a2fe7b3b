"""Unit tests for `GlobalRollupService`."""

import json

import pytest

from pvtrack.domain.progress import GlobalRollup
from pvtrack.service_layer.global_rollup import GlobalRollupService
from pvtrack.service_layer.unit_aggregator import UnitAggregator

# pylint: disable=redefined-outer-name
# pylint: disable=magic-value-comparison


@pytest.fixture
def units(kv, clock) -> UnitAggregator:
    return UnitAggregator(kv, clock)


@pytest.fixture
def rollups(kv, units) -> GlobalRollupService:
    return GlobalRollupService(kv, units, total_units=3)


def completed(units, template, unit_id):
    checklist = template.build(unit_id)
    for test_id in template.test_ids:
        checklist = checklist.toggled(test_id).toggled(test_id)
    return units.recompute(unit_id, checklist)


async def test_load_defaults_to_all_not_started(rollups):
    assert await rollups.load() == GlobalRollup.empty(3)


async def test_refresh_persists_rollup_from_given_summaries(rollups, units, template, kv):
    summaries = {"01": completed(units, template, "01")}

    result = await rollups.refresh(summaries)

    assert result.completed_units == 1
    assert result.not_started_units == 2
    assert result.overall_percentage == 33
    assert json.loads(kv.snapshot()["overallProgress"]) == {
        "totalCompletion": 33,
        "completedCount": 1,
        "inProgressCount": 0,
        "notStartedCount": 2,
        "totalPVs": 3,
    }
    assert await rollups.load() == result


async def test_refresh_without_summaries_reads_the_map(rollups, units, template):
    await units.persist(completed(units, template, "02"))
    result = await rollups.refresh()
    assert result.completed_units == 1


def test_recompute_can_override_total(rollups, units, template):
    result = rollups.recompute({"01": completed(units, template, "01")}, total_units=4)
    assert result.total_units == 4
    assert result.overall_percentage == 25


async def test_unreadable_stored_rollup_reads_as_default(kv, rollups):
    await kv.set_item("overallProgress", json.dumps({"totalPVs": 3}))
    assert await rollups.load() == GlobalRollup.empty(3)


def test_recompute_with_zero_total_counts_no_units(rollups, units, template):
    result = rollups.recompute({"01": completed(units, template, "01")}, total_units=0)
    assert result == GlobalRollup(
        total_units=0,
        completed_units=0,
        in_progress_units=0,
        not_started_units=0,
        overall_percentage=0,
    )
