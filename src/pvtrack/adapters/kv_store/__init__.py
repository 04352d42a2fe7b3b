"""Key-value store adapters."""

from .local import LocalKeyValueStore
from .memory import MemoryKeyValueStore
from .sqlalchemy_store import SqlAlchemyKeyValueStore

__all__ = ["LocalKeyValueStore", "MemoryKeyValueStore", "SqlAlchemyKeyValueStore"]
