"""Unit tests for the read-only `QueryFacade`."""

import json

from pvtrack.domain.progress import GlobalRollup
from pvtrack.domain.value_objects import Status
from pvtrack.service_layer.commands import ToggleTestStatus

# pylint: disable=magic-value-comparison


async def test_queries_on_empty_store_return_defaults(app, kv):
    queries = app.queries

    assert (await queries.checklist("01")).count(Status.NOT_STARTED) == 2
    summary = await queries.unit_summary("01")
    assert summary.completion_percentage == 0
    assert summary.total_test_count == 2
    assert await queries.unit_percentage("01") == 0
    assert await queries.global_rollup() == GlobalRollup.empty(3)
    assert await queries.recent_activity() == []
    # queries never write
    assert kv.snapshot() == {}


async def test_list_units_covers_every_configured_unit(app):
    await app.message_bus.handle(ToggleTestStatus("02", "test-1"))
    await app.message_bus.handle(ToggleTestStatus("02", "test-1"))

    overviews = await app.queries.list_units()

    assert [o.label for o in overviews] == ["PV01", "PV02", "PV03"]
    assert overviews[1].completion_percentage == 50
    assert overviews[1].status is Status.IN_PROGRESS
    assert overviews[1].completed_test_count == 1
    assert overviews[0].completed_test_count == 0


async def test_unit_percentage_falls_back_to_scalar(app, kv):
    await kv.set_item("pv-03-progress", "50")
    assert await app.queries.unit_percentage("03") == 50

    overview = (await app.queries.list_units())[2]
    assert overview.completion_percentage == 50
    # the completed count is unknown, not derived from the percentage
    assert overview.completed_test_count is None


async def test_map_entry_wins_over_scalar(app, kv):
    await kv.set_item("pv-01-progress", "50")
    await kv.set_item("pvUnitsData", json.dumps({"01": {"completionPercentage": 100}}))
    assert await app.queries.unit_percentage("01") == 100
