"""Database engine factory and helpers.

This module centralizes creation of SQLAlchemy Engines and applies
backend-specific tuning:

- **SQLite**: adds connection PRAGMAs to enable WAL and tune durability and
  temporary storage; in-memory databases share a single connection so every
  session sees the same data.
- **Other backends**: no tuning applied here.

Use this module whenever you need an Engine so that all connections are
consistently configured.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

SQLITE_NAMES = {"sqlite", "sqlite+pysqlite"}
MEMORY_DATABASES = {None, "", ":memory:"}


def is_sqlite(url: str | URL) -> bool:
    """Return True if the given SQLAlchemy URL or string corresponds to SQLite.

    Args:
        url: A database URL string or SQLAlchemy :class:`URL`.

    Returns:
        bool: True if the backend is SQLite, otherwise False.
    """
    u = make_url(str(url))
    return u.get_backend_name() in SQLITE_NAMES


def make_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy Engine for the given URL.

    If the backend is SQLite, applies a set of PRAGMAs on every connection:
        - ``journal_mode=WAL`` (write-ahead logging)
        - ``synchronous=NORMAL`` (balanced durability)
        - ``temp_store=MEMORY`` (reduce temp file I/O)

    Args:
        url: Database connection URL (str or :class:`URL`).
        echo: If True, log SQL statements.

    Returns:
        Engine: Configured SQLAlchemy Engine.
    """
    u = make_url(str(url))

    if not is_sqlite(u):
        return create_engine(u, echo=echo)

    if u.database in MEMORY_DATABASES:
        engine = create_engine(
            u,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(u, echo=echo)

    @event.listens_for(engine, "connect")
    def _sqlite_pragmas(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore #pylint: disable=W0613
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA journal_mode=WAL;")
        cur.execute("PRAGMA synchronous=NORMAL;")
        cur.execute("PRAGMA temp_store=MEMORY;")
        cur.close()

    return engine
