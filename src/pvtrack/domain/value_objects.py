"""Module including value objects used across the domain layer."""

from enum import Enum


class Status(str, Enum):
    """Progress status shared by test records and unit summaries.

    The string values are the ones persisted in the key-value store.
    """

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    def advance(self) -> "Status":
        """Return the next status along the toggle cycle.

        ``not-started -> in-progress -> completed -> not-started``
        """
        return _CYCLE[self]


_CYCLE = {
    Status.NOT_STARTED: Status.IN_PROGRESS,
    Status.IN_PROGRESS: Status.COMPLETED,
    Status.COMPLETED: Status.NOT_STARTED,
}
