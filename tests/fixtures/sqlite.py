"""sqlite-specific fixtures"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.engine import URL

from pvtrack.adapters.db.engine import make_engine
from pvtrack.adapters.db.metadata import metadata

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


@pytest.fixture
def sqlite_engine_memory() -> Iterator[Engine]:
    """In-memory SQLite engine with the schema created.

    Uses `make_engine()` so SQLite PRAGMAs and the shared connection apply.

    Yields:
        Engine: SQLAlchemy engine bound to an in-memory DB.
    """
    test_engine = make_engine("sqlite+pysqlite:///:memory:")
    metadata.create_all(test_engine)
    yield test_engine
    metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    """URL of a fresh SQLite file under the test's temp dir."""
    return URL.create(
        "sqlite+pysqlite", database=str(tmp_path / "pvtrack.db")
    ).render_as_string()


@pytest.fixture
def sqlite_engine_file(sqlite_url: str) -> Iterator[Engine]:
    """File-backed SQLite engine with the schema created (per test).

    Yields:
        Engine: SQLAlchemy engine pointing at a temp file DB.
    """
    test_engine = make_engine(sqlite_url)
    metadata.create_all(test_engine)
    try:
        yield test_engine
    finally:
        test_engine.dispose()
