"""SQLAlchemy-backed key-value store adapter for PVTRACK.

Stores every key as one row of the ``kv_items`` table (see
`pvtrack.adapters.db.schema`). Each operation runs in its own short
transaction, so single-key writes are atomic while multi-key sequences are
not, matching the `KeyValueStore` contract.

The store is driven from asyncio code but executes its statements
synchronously on the calling thread; calls are short, local and never
overlap because callers await each step in turn.

Exceptions:
    Maps SQLAlchemy `DBAPIError` to `StoreUnavailableError`.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import DBAPIError

from pvtrack.adapters.clock import SystemClock
from pvtrack.adapters.db.metadata import metadata
from pvtrack.adapters.db.schema import KEY_MAX_LENGTH, kv_items
from pvtrack.interfaces.kv_store import (
    InvalidKeyError,
    KeyValueStore,
    StoreUnavailableError,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from pvtrack.interfaces.clock import Clock


class SqlAlchemyKeyValueStore(KeyValueStore):
    """KeyValueStore implementation on a single SQLAlchemy table."""

    def __init__(self, engine: Engine, clock: Clock | None = None) -> None:
        self.engine = engine
        self._clock = clock or SystemClock()

    def create_schema(self) -> None:
        """Create the ``kv_items`` table if it does not exist yet.

        Raises:
            StoreUnavailableError: If the database cannot be reached.
        """
        try:
            metadata.create_all(self.engine, tables=[kv_items])
        except DBAPIError as e:
            raise StoreUnavailableError(str(e)) from e

    # --------------------------------------------------------------------- #
    # Interface implementation
    # --------------------------------------------------------------------- #

    async def get_item(self, key: str) -> str | None:
        self._validate_db_key(key)
        stmt = select(kv_items.c.value).where(kv_items.c.key == key)
        try:
            with self.engine.connect() as conn:
                return conn.execute(stmt).scalar_one_or_none()
        except DBAPIError as e:
            raise StoreUnavailableError(str(e)) from e

    async def set_item(self, key: str, value: str) -> None:
        self._validate_db_key(key)
        now = self._clock.now()
        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    update(kv_items)
                    .where(kv_items.c.key == key)
                    .values(value=value, updated_at=now)
                )
                if result.rowcount == 0:
                    conn.execute(
                        insert(kv_items).values(key=key, value=value, updated_at=now)
                    )
        except DBAPIError as e:
            raise StoreUnavailableError(str(e)) from e

    async def remove_item(self, key: str) -> None:
        self._validate_db_key(key)
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(kv_items).where(kv_items.c.key == key))
        except DBAPIError as e:
            raise StoreUnavailableError(str(e)) from e

    async def keys(self) -> Iterable[str]:
        try:
            with self.engine.connect() as conn:
                return list(conn.execute(select(kv_items.c.key)).scalars())
        except DBAPIError as e:
            raise StoreUnavailableError(str(e)) from e

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _validate_db_key(self, key: str) -> None:
        self.validate_key(key)
        if len(key) > KEY_MAX_LENGTH:
            raise InvalidKeyError(
                f"Key longer than {KEY_MAX_LENGTH} characters: {key[:20]!r}..."
            )
