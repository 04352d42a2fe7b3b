"""Recent-activity log entries."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from pvtrack.domain.value_objects import Status

STATUS_CHANGE = "status_change"


@dataclass(frozen=True, slots=True)
class ActivityEntry:
    """A single status change of one test in one unit."""

    unit_id: str
    test_id: str
    new_status: Status
    timestamp: datetime
    action: str = STATUS_CHANGE


def prepend_bounded(
    entries: Sequence[ActivityEntry], entry: ActivityEntry, limit: int
) -> list[ActivityEntry]:
    """Return ``entry`` followed by ``entries``, keeping the newest ``limit``.

    The log is ordered newest first, so truncation drops from the tail.
    """
    return [entry, *entries][: max(limit, 0)]
