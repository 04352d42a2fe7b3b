"""Progress commands of the PVTRACK CLI.

Read-only views (``status``, ``units``, ``show``, ``activity``, ``watch``) go
through the query facade; ``toggle`` and ``rebuild`` go through the message
bus. Tables and text are written to stdout; notices go to stderr.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

import click
from rich.console import Console

from pvtrack.adapters.clock import SystemClock
from pvtrack.domain.checklist import TEST_ID_PREFIX, make_test_id
from pvtrack.domain.unit_ids import unit_label
from pvtrack.interfaces.kv_store import KeyValueStoreError
from pvtrack.service_layer import commands

from . import render
from .context import CliState, pass_state
from .helpers import error, success, warn

logger = logging.getLogger(__name__)

T = TypeVar("T")

json_option = click.option(
    "--json", "as_json", is_flag=True, help="Print machine-readable JSON to stdout."
)


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run one coroutine, turning store failures into a CLI error."""
    try:
        return asyncio.run(coro)
    except KeyValueStoreError as e:
        error(f"Store error: {e}")
        raise click.ClickException(str(e)) from e


def echo_json(payload: object) -> None:
    click.echo(json.dumps(payload, indent=2))


def normalize_test_id(value: str) -> str:
    """``"3"`` → ``"test-3"``; anything else is taken as a test id."""
    value = value.strip()
    if value.isascii() and value.isdigit():
        return make_test_id(int(value))
    return value if value.startswith(TEST_ID_PREFIX) else f"{TEST_ID_PREFIX}{value}"


@click.command()
@json_option
@pass_state
def status(state: CliState, as_json: bool) -> None:
    """Show overall completion of the train."""
    rollup = run(state.app.queries.global_rollup())
    if as_json:
        echo_json(render.rollup_json(rollup))
        return
    for line in render.rollup_lines(rollup):
        click.echo(line)


@click.command()
@json_option
@pass_state
def units(state: CliState, as_json: bool) -> None:
    """List every unit with its completion."""
    overviews = run(state.app.queries.list_units())
    if as_json:
        echo_json(render.units_json(overviews))
        return
    Console().print(render.units_table(overviews, state.settings.tests_per_unit))


@click.command()
@click.argument("unit")
@json_option
@pass_state
def show(state: CliState, unit: str, as_json: bool) -> None:
    """Show the checklist of UNIT (e.g. 5, 05 or PV05)."""
    unit_id = state.unit_id(unit)

    async def _load():
        queries = state.app.queries
        return await queries.checklist(unit_id), await queries.unit_summary(unit_id)

    checklist, summary = run(_load())
    if as_json:
        echo_json(render.checklist_json(checklist, summary))
        return
    Console().print(render.checklist_table(checklist, summary))


@click.command()
@click.argument("unit")
@click.argument("test")
@pass_state
def toggle(state: CliState, unit: str, test: str) -> None:
    """Advance TEST of UNIT: not started → in progress → completed → not started.

    TEST is the test number (e.g. 3) or id (e.g. test-3).
    """
    unit_id = state.unit_id(unit)
    test_id = normalize_test_id(test)
    checklist = run(
        state.app.message_bus.handle(commands.ToggleTestStatus(unit_id, test_id))
    )
    if checklist is None:
        raise click.ClickException(
            f"Could not read the checklist of {unit_label(unit_id)}; nothing changed."
        )
    if (record := checklist.get(test_id)) is None:
        warn(f"{unit_label(unit_id)} has no test {test_id}; nothing changed.")
        return
    success(
        f"{unit_label(unit_id)} {record.id} is now {render.status_text(record.status)}."
    )


@click.command()
@json_option
@pass_state
def activity(state: CliState, as_json: bool) -> None:
    """Show the most recent status changes, newest first."""
    entries = run(state.app.queries.recent_activity())
    if as_json:
        echo_json(render.activity_json(entries))
        return
    for line in render.activity_lines(entries, SystemClock().now()):
        click.echo(line)


@click.command()
@pass_state
def rebuild(state: CliState) -> None:
    """Recompute every unit summary and the overall progress from the checklists."""
    rollup = run(state.app.message_bus.handle(commands.RebuildRollups()))
    success(
        f"Rebuilt {rollup.total_units} units: "
        f"{rollup.overall_percentage}% overall completion."
    )


@click.command()
@click.option(
    "--interval",
    type=click.FloatRange(min=0),
    default=5.0,
    show_default=True,
    help="Seconds between refreshes.",
)
@click.option(
    "--iterations",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Stop after this many refreshes (0 runs until interrupted).",
)
@pass_state
def watch(state: CliState, interval: float, iterations: int) -> None:
    """Redraw overall progress and recent activity on an interval."""
    console = Console()
    clock = SystemClock()

    async def _loop() -> None:
        queries = state.app.queries
        count = 0
        while True:
            rollup = await queries.global_rollup()
            entries = await queries.recent_activity()
            now = clock.now()
            console.rule(f"PVTRACK {now:%H:%M:%S}")
            for line in render.rollup_lines(rollup):
                console.print(line, highlight=False)
            for line in render.activity_lines(entries, now):
                console.print(line, highlight=False, markup=False)
            count += 1
            if iterations and count >= iterations:
                return
            await asyncio.sleep(interval)

    try:
        run(_loop())
    except KeyboardInterrupt:
        logger.debug("watch interrupted")
