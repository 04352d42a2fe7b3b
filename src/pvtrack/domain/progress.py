"""Progress rules: unit summaries and the fleet-wide rollup.

Both rollups are pure functions of their inputs:

- a `UnitSummary` is derived from one `Checklist`;
- a `GlobalRollup` is derived from the full mapping of unit summaries and the
  list of unit ids the train is configured with.

Percentages use round-half-up integer arithmetic so that results never depend
on float representation. Only *completed* tests count towards a unit's
percentage, and only units at exactly 100% count as completed units.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime

from pvtrack.domain.checklist import Checklist
from pvtrack.domain.value_objects import Status


def completion_percentage(completed: int, total: int) -> int:
    """Return ``round(100 * completed / total)`` rounding halves up.

    A zero ``total`` yields 0 rather than raising.
    """
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


def status_for_percentage(percentage: int) -> Status:
    """Map a completion percentage onto its status category."""
    if percentage <= 0:
        return Status.NOT_STARTED
    if percentage >= 100:
        return Status.COMPLETED
    return Status.IN_PROGRESS


@dataclass(frozen=True, slots=True)
class UnitSummary:
    """Derived completion summary of one unit."""

    unit_id: str
    completion_percentage: int
    status: Status
    completed_test_count: int
    in_progress_test_count: int
    not_started_test_count: int
    total_test_count: int
    last_updated: datetime | None

    @classmethod
    def empty(cls, unit_id: str, total_test_count: int = 0) -> UnitSummary:
        """Zeroed summary of a unit nothing has been recorded for."""
        return cls(
            unit_id=unit_id,
            completion_percentage=0,
            status=Status.NOT_STARTED,
            completed_test_count=0,
            in_progress_test_count=0,
            not_started_test_count=total_test_count,
            total_test_count=total_test_count,
            last_updated=None,
        )


def summarize(checklist: Checklist, at: datetime) -> UnitSummary:
    """Derive the `UnitSummary` of ``checklist`` as of ``at``."""
    completed = checklist.count(Status.COMPLETED)
    percentage = completion_percentage(completed, len(checklist))
    return UnitSummary(
        unit_id=checklist.unit_id,
        completion_percentage=percentage,
        status=status_for_percentage(percentage),
        completed_test_count=completed,
        in_progress_test_count=checklist.count(Status.IN_PROGRESS),
        not_started_test_count=checklist.count(Status.NOT_STARTED),
        total_test_count=len(checklist),
        last_updated=at,
    )


@dataclass(frozen=True, slots=True)
class GlobalRollup:
    """Fleet-wide completion counts.

    Invariant: the three unit counts always sum to ``total_units``.
    """

    total_units: int
    completed_units: int
    in_progress_units: int
    not_started_units: int
    overall_percentage: int

    @classmethod
    def empty(cls, total_units: int) -> GlobalRollup:
        """Rollup of a train where no unit has been started."""
        return cls(
            total_units=total_units,
            completed_units=0,
            in_progress_units=0,
            not_started_units=total_units,
            overall_percentage=0,
        )


def rollup(
    summaries: Mapping[str, UnitSummary], unit_ids: Iterable[str]
) -> GlobalRollup:
    """Recompute the fleet-wide rollup from scratch.

    Every id in ``unit_ids`` is counted exactly once. Units with no entry in
    ``summaries`` are not started; entries for ids outside ``unit_ids`` are
    ignored. The category of each unit is re-derived from its percentage
    rather than trusted from the stored status.
    """
    counts = dict.fromkeys(Status, 0)
    total = 0
    for unit_id in unit_ids:
        total += 1
        summary = summaries.get(unit_id)
        percentage = summary.completion_percentage if summary else 0
        counts[status_for_percentage(percentage)] += 1

    completed = counts[Status.COMPLETED]
    return GlobalRollup(
        total_units=total,
        completed_units=completed,
        in_progress_units=counts[Status.IN_PROGRESS],
        not_started_units=counts[Status.NOT_STARTED],
        overall_percentage=completion_percentage(completed, total),
    )
