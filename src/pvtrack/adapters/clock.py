"""Clocks for PVTRACK."""

from datetime import datetime, timezone

from pvtrack.interfaces.clock import Clock

# pylint: disable=too-few-public-methods


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """A clock that returns a settable instant.

    Note:
        Not suitable for production use; primarily for testing and demos.
    """

    def __init__(self, instant: datetime) -> None:
        self.instant = instant

    def now(self) -> datetime:
        return self.instant
