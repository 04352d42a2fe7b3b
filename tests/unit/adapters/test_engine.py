"""Unit tests for `pvtrack.adapters.db.engine`."""

import pytest
from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.pool import StaticPool

from pvtrack.adapters.db.engine import is_sqlite, make_engine

# pylint: disable=magic-value-comparison


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("sqlite://", True),
        ("sqlite+pysqlite:///tmp/x.db", True),
        ("postgresql+psycopg://u:p@localhost/db", False),
        (URL.create("sqlite+pysqlite", database=":memory:"), True),
    ],
)
def test_is_sqlite(url, expected):
    assert is_sqlite(url) is expected


def test_memory_engine_shares_one_connection():
    engine = make_engine("sqlite+pysqlite:///:memory:")
    assert isinstance(engine.pool, StaticPool)
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE t (x INTEGER)"))
    with engine.connect() as conn:
        assert conn.execute(text("SELECT count(*) FROM t")).scalar_one() == 0
    engine.dispose()


def test_file_engine_applies_pragmas(tmp_path):
    engine = make_engine(f"sqlite+pysqlite:///{tmp_path / 'p.db'}")
    with engine.connect() as conn:
        assert conn.execute(text("PRAGMA journal_mode")).scalar_one() == "wal"
        assert conn.execute(text("PRAGMA synchronous")).scalar_one() == 1  # NORMAL
    engine.dispose()
