"""Global pytest fixtures for PVTRACK."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from pvtrack.adapters.clock import FixedClock
from pvtrack.adapters.kv_store import MemoryKeyValueStore
from pvtrack.bootstrap import AppContainer, bootstrap
from pvtrack.config import TrackerSettings
from pvtrack.domain.checklist import ChecklistTemplate

# pylint: disable=redefined-outer-name

pytest_plugins = [
    "tests.fixtures.sqlite",
]

T0 = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def template() -> ChecklistTemplate:
    """Two-test template; keeps percentages easy to reason about (0/50/100)."""
    return ChecklistTemplate.from_names(["Hard tag", "Power ON test"])


@pytest.fixture
def settings(template: ChecklistTemplate) -> TrackerSettings:
    """A three-unit train with a three-entry activity log."""
    return TrackerSettings(total_units=3, template=template, activity_limit=3)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(T0)


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    """Fresh in-memory key-value store."""
    return MemoryKeyValueStore()


@pytest.fixture
def app(
    kv: MemoryKeyValueStore, settings: TrackerSettings, clock: FixedClock
) -> AppContainer:
    """Application bootstrapped on the in-memory store with small settings."""
    return bootstrap(store=kv, settings=settings, clock=clock)
