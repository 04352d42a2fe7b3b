"""Checklist model: test records, per-unit checklists and the checklist template."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, replace

from pvtrack.domain.value_objects import Status

TEST_ID_PREFIX = "test-"


def make_test_id(position: int) -> str:
    """Return the stable test id of the 1-based template ``position``."""
    return f"{TEST_ID_PREFIX}{position}"


@dataclass(frozen=True, slots=True)
class TestRecord:
    """One line item of a checklist."""

    __test__ = False  # not a pytest test class

    id: str
    name: str
    status: Status = Status.NOT_STARTED


@dataclass(frozen=True, slots=True)
class Checklist:
    """The ordered test records of one unit.

    Instances are immutable; a toggle produces a new checklist.
    """

    unit_id: str
    records: tuple[TestRecord, ...]

    def __iter__(self) -> Iterator[TestRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, test_id: object) -> bool:
        return any(record.id == test_id for record in self.records)

    def get(self, test_id: str) -> TestRecord | None:
        """Return the record with ``test_id``, or None."""
        return next((r for r in self.records if r.id == test_id), None)

    def count(self, status: Status) -> int:
        """Number of records currently in ``status``."""
        return sum(1 for record in self.records if record.status is status)

    def toggled(self, test_id: str) -> Checklist:
        """Return a copy with ``test_id`` advanced one step along the cycle.

        An unknown ``test_id`` leaves the checklist unchanged and returns
        ``self``.
        """
        if test_id not in self:
            return self
        return replace(
            self,
            records=tuple(
                replace(record, status=record.status.advance())
                if record.id == test_id
                else record
                for record in self.records
            ),
        )


@dataclass(frozen=True, slots=True)
class ChecklistTemplate:
    """The predefined set of tests every unit carries.

    Test ids are derived from position (``test-1`` .. ``test-N``); names are
    display labels and never change.
    """

    names: tuple[str, ...]

    @classmethod
    def from_names(cls, names: Sequence[str]) -> ChecklistTemplate:
        """Build a template from an ordered sequence of test names."""
        return cls(names=tuple(names))

    @property
    def test_ids(self) -> tuple[str, ...]:
        """Template test ids in order."""
        return tuple(make_test_id(i) for i in range(1, len(self.names) + 1))

    def __len__(self) -> int:
        return len(self.names)

    def build(self, unit_id: str) -> Checklist:
        """Return the default checklist for ``unit_id`` with every test not started."""
        return self.reconcile(unit_id, {})

    def reconcile(self, unit_id: str, statuses: Mapping[str, Status]) -> Checklist:
        """Project stored statuses onto the template.

        Records come out in template order with template names. Ids missing
        from ``statuses`` are not started; ids the template does not know are
        dropped.
        """
        return Checklist(
            unit_id=unit_id,
            records=tuple(
                TestRecord(
                    id=test_id,
                    name=name,
                    status=statuses.get(test_id, Status.NOT_STARTED),
                )
                for test_id, name in zip(self.test_ids, self.names)
            ),
        )
