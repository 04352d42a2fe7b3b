"""Table definitions for the SQLAlchemy key-value store."""

from sqlalchemy import Column, String, Table, Text

from .metadata import metadata
from .sa_types import UTCDateTime

KEY_MAX_LENGTH = 255

kv_items = Table(
    "kv_items",
    metadata,
    Column("key", String(KEY_MAX_LENGTH), primary_key=True),
    Column("value", Text, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
)
