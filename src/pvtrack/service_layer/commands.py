"""Module defining Commands."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""


@dataclass(frozen=True)
class ToggleTestStatus(Command):
    """Command to advance one test of one unit along the status cycle."""

    unit_id: str
    test_id: str


@dataclass(frozen=True)
class RebuildRollups(Command):
    """Command to re-derive every unit summary and the fleet rollup from the checklists."""
