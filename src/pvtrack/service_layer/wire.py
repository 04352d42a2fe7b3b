"""Conversions between domain objects and their persisted JSON shapes.

The wire names (``completionPercentage``, ``completedCount``, ``pvId`` ...)
are the ones the stored data has always used; keep them stable so existing
stores stay readable.

Decoders are strict about structure and raise `MappingError` on anything they
cannot interpret. Callers decide whether that means "fall back to a default"
or "skip this entry".
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pvtrack.domain.activity import STATUS_CHANGE, ActivityEntry
from pvtrack.domain.checklist import TEST_ID_PREFIX, Checklist, make_test_id
from pvtrack.domain.progress import GlobalRollup, UnitSummary, status_for_percentage
from pvtrack.domain.value_objects import Status

UTC_SUFFIX = "Z"


class MappingError(ValueError):
    """Raised when a persisted value does not have the expected shape."""


# ============================================================================
#                               Scalars
# ============================================================================


def format_timestamp(value: datetime) -> str:
    """Render ``value`` as an ISO-8601 UTC string with a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", UTC_SUFFIX)


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not isinstance(value, str):
        raise MappingError(f"Expected an ISO-8601 string, got {value!r}")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise MappingError(f"Invalid timestamp: {value!r}") from e
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _int_field(data: Mapping[str, Any], name: str, default: int | None = None) -> int:
    value = data.get(name, default)
    # bool is an int subclass; a stored true/false is not a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise MappingError(f"Field {name!r} must be an integer, got {value!r}")
    return value


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise MappingError(f"Expected an object for {what}, got {type(data).__name__}")
    return data


def percentage_from_wire(data: Any) -> int:
    """Decode the standalone ``pv-<unit>-progress`` value."""
    if isinstance(data, str):
        try:
            data = int(data, 10)
        except ValueError as e:
            raise MappingError(f"Invalid percentage: {data!r}") from e
    if isinstance(data, bool) or not isinstance(data, int) or not 0 <= data <= 100:
        raise MappingError(f"Invalid percentage: {data!r}")
    return data


# ============================================================================
#                               Checklists
# ============================================================================


def checklist_to_wire(checklist: Checklist) -> list[dict[str, str]]:
    """Encode a checklist as its list of test records."""
    return [
        {"id": record.id, "name": record.name, "status": record.status.value}
        for record in checklist
    ]


def checklist_statuses_from_wire(data: Any) -> dict[str, Status]:
    """Decode a stored checklist into a ``test id -> status`` mapping.

    Names are not decoded; they come from the checklist template. An
    unrecognised status string reads as not started.

    Raises:
        MappingError: If ``data`` is not a list of objects with string ids.
    """
    if not isinstance(data, list):
        raise MappingError(f"Expected a list of test records, got {type(data).__name__}")
    statuses: dict[str, Status] = {}
    for item in data:
        record = _require_mapping(item, "test record")
        if not isinstance(test_id := record.get("id"), str):
            raise MappingError(f"Test record without a string id: {record!r}")
        try:
            statuses[test_id] = Status(record.get("status"))
        except ValueError:
            statuses[test_id] = Status.NOT_STARTED
    return statuses


# ============================================================================
#                               Unit summaries
# ============================================================================


def summary_to_wire(summary: UnitSummary) -> dict[str, Any]:
    """Encode a unit summary as an entry of the ``pvUnitsData`` map."""
    data: dict[str, Any] = {
        "completionPercentage": summary.completion_percentage,
        "status": summary.status.value,
        "completedTests": summary.completed_test_count,
        "inProgressTests": summary.in_progress_test_count,
        "notStartedTests": summary.not_started_test_count,
        "totalTests": summary.total_test_count,
    }
    if summary.last_updated is not None:
        data["timestamp"] = format_timestamp(summary.last_updated)
    return data


def summary_from_wire(unit_id: str, data: Any) -> UnitSummary:
    """Decode one ``pvUnitsData`` entry.

    Only ``completionPercentage`` is required; counts missing from older
    entries read as 0. The status is re-derived from the percentage.

    Raises:
        MappingError: If the entry is not an object or the percentage is invalid.
    """
    entry = _require_mapping(data, f"unit {unit_id}")
    if "completionPercentage" not in entry:
        raise MappingError(f"Unit {unit_id} has no completionPercentage")
    percentage = percentage_from_wire(entry["completionPercentage"])
    timestamp = entry.get("timestamp")
    return UnitSummary(
        unit_id=unit_id,
        completion_percentage=percentage,
        status=status_for_percentage(percentage),
        completed_test_count=_int_field(entry, "completedTests", 0),
        in_progress_test_count=_int_field(entry, "inProgressTests", 0),
        not_started_test_count=_int_field(entry, "notStartedTests", 0),
        total_test_count=_int_field(entry, "totalTests", 0),
        last_updated=parse_timestamp(timestamp) if timestamp is not None else None,
    )


# ============================================================================
#                               Global rollup
# ============================================================================


def rollup_to_wire(rollup: GlobalRollup) -> dict[str, int]:
    """Encode the fleet-wide rollup."""
    return {
        "totalCompletion": rollup.overall_percentage,
        "completedCount": rollup.completed_units,
        "inProgressCount": rollup.in_progress_units,
        "notStartedCount": rollup.not_started_units,
        "totalPVs": rollup.total_units,
    }


def rollup_from_wire(data: Any) -> GlobalRollup:
    """Decode the fleet-wide rollup.

    Raises:
        MappingError: If a field is missing or the unit counts do not add up
            to the unit total.
    """
    entry = _require_mapping(data, "overall progress")
    rollup = GlobalRollup(
        total_units=_int_field(entry, "totalPVs"),
        completed_units=_int_field(entry, "completedCount"),
        in_progress_units=_int_field(entry, "inProgressCount"),
        not_started_units=_int_field(entry, "notStartedCount"),
        overall_percentage=_int_field(entry, "totalCompletion"),
    )
    counted = (
        rollup.completed_units + rollup.in_progress_units + rollup.not_started_units
    )
    if counted != rollup.total_units:
        raise MappingError(
            f"Unit counts add up to {counted}, expected {rollup.total_units}"
        )
    return rollup


# ============================================================================
#                               Activity
# ============================================================================


def activity_to_wire(entry: ActivityEntry) -> dict[str, str]:
    """Encode one activity entry."""
    return {
        "pvId": entry.unit_id,
        "testId": entry.test_id,
        "action": entry.action,
        "newStatus": entry.new_status.value,
        "timestamp": format_timestamp(entry.timestamp),
    }


def activity_from_wire(data: Any) -> ActivityEntry:
    """Decode one activity entry.

    Older entries store the bare test number (``"7"``) instead of the test id;
    those are expanded to ``"test-7"``.

    Raises:
        MappingError: If a field is missing or has an unknown value.
    """
    entry = _require_mapping(data, "activity entry")
    unit_id, test_id = entry.get("pvId"), entry.get("testId")
    if not isinstance(unit_id, str) or not isinstance(test_id, str):
        raise MappingError(f"Activity entry without pvId/testId: {entry!r}")
    if test_id.isascii() and test_id.isdigit():
        test_id = make_test_id(int(test_id))
    elif not test_id.startswith(TEST_ID_PREFIX):
        raise MappingError(f"Unrecognised test id: {test_id!r}")
    try:
        new_status = Status(entry.get("newStatus"))
    except ValueError as e:
        raise MappingError(f"Unknown status: {entry.get('newStatus')!r}") from e
    return ActivityEntry(
        unit_id=unit_id,
        test_id=test_id,
        new_status=new_status,
        timestamp=parse_timestamp(entry.get("timestamp")),
        action=str(entry.get("action") or STATUS_CHANGE),
    )
