"""Interfaces (application boundary) for PVTRACK.

Defines framework-free application contracts: the key-value store port and
the clock used to timestamp summaries and activity entries. Business rules
stay out of this package.

Dependency rule: this package is independent; do not import from any
`pvtrack.*` modules. It may be imported by `pvtrack.service_layer`,
`pvtrack.adapters`, and `pvtrack.bootstrap`.
"""

from .clock import Clock
from .kv_store import (
    InvalidKeyError,
    KeyValueStore,
    KeyValueStoreError,
    StoreUnavailableError,
)

__all__ = [
    "Clock",
    "InvalidKeyError",
    "KeyValueStore",
    "KeyValueStoreError",
    "StoreUnavailableError",
]
