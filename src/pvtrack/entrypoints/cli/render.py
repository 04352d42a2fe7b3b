"""Rendering of query results for the terminal and for ``--json`` output."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from rich.table import Table

from pvtrack.domain.activity import ActivityEntry
from pvtrack.domain.checklist import Checklist
from pvtrack.domain.progress import GlobalRollup, UnitSummary
from pvtrack.domain.unit_ids import unit_label
from pvtrack.domain.value_objects import Status
from pvtrack.service_layer.queries import UnitOverview

STATUS_STYLES = {
    Status.COMPLETED: "green",
    Status.IN_PROGRESS: "yellow",
    Status.NOT_STARTED: "red",
}

STATUS_PHRASES = {
    Status.COMPLETED: "marked as complete",
    Status.IN_PROGRESS: "marked as in progress",
    Status.NOT_STARTED: "marked as not started",
}


def status_text(status: Status) -> str:
    """``"in-progress"`` → ``"In Progress"``."""
    return status.value.replace("-", " ").title()


def styled_status(status: Status) -> str:
    return f"[{STATUS_STYLES[status]}]{status_text(status)}[/]"


def time_ago(then: datetime, now: datetime) -> str:
    """Compact age of ``then``: minutes below an hour, hours above."""
    seconds = max((now - then).total_seconds(), 0)
    minutes = round(seconds / 60)
    if minutes < 60:
        return f"{minutes}m ago"
    return f"{round(seconds / 3600)}h ago"


def rollup_lines(rollup: GlobalRollup) -> list[str]:
    return [
        f"Overall completion: {rollup.overall_percentage}%",
        (
            f"{rollup.completed_units} of {rollup.total_units} PV units completed, "
            f"{rollup.in_progress_units} in progress, "
            f"{rollup.not_started_units} not started"
        ),
    ]


def units_table(overviews: list[UnitOverview], tests_per_unit: int) -> Table:
    table = Table(title="CCL Train")
    table.add_column("Unit")
    table.add_column("Progress", justify="right")
    table.add_column("Status")
    table.add_column("Tests completed", justify="right")
    for unit in overviews:
        completed = (
            "?" if unit.completed_test_count is None else str(unit.completed_test_count)
        )
        table.add_row(
            unit.label,
            f"{unit.completion_percentage}%",
            styled_status(unit.status),
            f"{completed} of {tests_per_unit}",
        )
    return table


def checklist_table(checklist: Checklist, summary: UnitSummary) -> Table:
    table = Table(
        title=f"{unit_label(checklist.unit_id)}: {summary.completion_percentage}% complete"
    )
    table.add_column("Test")
    table.add_column("Name")
    table.add_column("Status")
    for record in checklist:
        table.add_row(record.id, record.name, styled_status(record.status))
    return table


def activity_lines(entries: list[ActivityEntry], now: datetime) -> list[str]:
    if not entries:
        return ["No recent activity"]
    return [
        (
            f"{unit_label(e.unit_id)} updated: TestID #{e.test_id.removeprefix('test-')} "
            f"{STATUS_PHRASES[e.new_status]} ({time_ago(e.timestamp, now)})"
        )
        for e in entries
    ]


# ============================================================================
#                               JSON payloads
# ============================================================================


def rollup_json(rollup: GlobalRollup) -> dict[str, Any]:
    return {
        "totalUnits": rollup.total_units,
        "completedUnits": rollup.completed_units,
        "inProgressUnits": rollup.in_progress_units,
        "notStartedUnits": rollup.not_started_units,
        "overallPercentage": rollup.overall_percentage,
    }


def units_json(overviews: list[UnitOverview]) -> list[dict[str, Any]]:
    return [
        {
            "unitId": u.unit_id,
            "label": u.label,
            "completionPercentage": u.completion_percentage,
            "status": u.status.value,
            "completedTestCount": u.completed_test_count,
        }
        for u in overviews
    ]


def checklist_json(checklist: Checklist, summary: UnitSummary) -> dict[str, Any]:
    return {
        "unitId": checklist.unit_id,
        "completionPercentage": summary.completion_percentage,
        "status": summary.status.value,
        "tests": [
            {"id": r.id, "name": r.name, "status": r.status.value} for r in checklist
        ],
    }


def activity_json(entries: list[ActivityEntry]) -> list[dict[str, Any]]:
    return [
        {
            "unitId": e.unit_id,
            "testId": e.test_id,
            "newStatus": e.new_status.value,
            "timestamp": e.timestamp.isoformat(),
        }
        for e in entries
    ]
