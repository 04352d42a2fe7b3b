"""Pytest fixtures for key-value store contract tests.

Provided fixtures
-----------------
- **store**: Parametrized backend factory that returns a **fresh**
  `KeyValueStore` per test:
    - `"memory"` → `MemoryKeyValueStore`
    - `"local"` → `LocalKeyValueStore` under the test's temp dir
    - `"sqlite"` → `SqlAlchemyKeyValueStore` on an in-memory SQLite engine
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from pvtrack.adapters.kv_store import (
    LocalKeyValueStore,
    MemoryKeyValueStore,
    SqlAlchemyKeyValueStore,
)

if TYPE_CHECKING:
    from pvtrack.interfaces.kv_store import KeyValueStore


@pytest.fixture(params=["memory", "local", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> KeyValueStore:
    """Return a fresh key-value store for the requested backend."""
    match request.param:
        case "memory":
            return MemoryKeyValueStore()
        case "local":
            return LocalKeyValueStore(tmp_path / "kv")
        case "sqlite":
            engine = request.getfixturevalue("sqlite_engine_memory")
            return SqlAlchemyKeyValueStore(engine)
        case _:
            raise ValueError(f"unknown store type: {request.param}")
