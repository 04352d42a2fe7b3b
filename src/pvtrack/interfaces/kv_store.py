"""Key-value store interface for PVTRACK.

This module defines:
- The `KeyValueStore` port (framework-free ABC): an asynchronous store of
  string values under string keys.
- A small, adapter-agnostic exception hierarchy for precise error handling.

Layering & dependency rules:
- Lives under `pvtrack.interfaces`. Do NOT import from adapters, bootstrap, or entrypoints.
- Safe to import from service layer and adapters.

Contract overview
-----------------
- Single-key operations only. There are no transactions and no atomic
  multi-key writes; callers must tolerate a crash between two writes.
- `get_item` returns None for a missing key; it never raises for absence.
- `set_item` overwrites unconditionally (last write wins).
- `remove_item` on a missing key is a no-op.
- Keys are non-empty strings; adapters may reject keys they cannot address
  with `InvalidKeyError`.
- Errors:
  * `InvalidKeyError`: the key is empty or cannot be represented by the backend.
  * `StoreUnavailableError`: I/O, driver or connection failures.
"""

import abc
from collections.abc import Iterable

# --- Exceptions to standardize adapter behavior ---


class KeyValueStoreError(Exception):
    """Base class for PVTRACK key-value store errors."""


class InvalidKeyError(KeyValueStoreError, ValueError):
    """The key is empty or cannot be addressed by this backend."""


class StoreUnavailableError(KeyValueStoreError):
    """Operational errors reading from or writing to the backend."""


# --- Port ---


class KeyValueStore(abc.ABC):
    """Abstract base class for asynchronous string key-value storage."""

    @abc.abstractmethod
    async def get_item(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None if absent.

        Raises:
            InvalidKeyError: If the key is invalid for this backend.
            StoreUnavailableError: If the backend cannot be read.
        """

    @abc.abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        Raises:
            InvalidKeyError: If the key is invalid for this backend.
            StoreUnavailableError: If the backend cannot be written.
        """

    @abc.abstractmethod
    async def remove_item(self, key: str) -> None:
        """Remove ``key`` if present.

        Raises:
            InvalidKeyError: If the key is invalid for this backend.
            StoreUnavailableError: If the backend cannot be written.
        """

    @abc.abstractmethod
    async def keys(self) -> Iterable[str]:
        """Return every key currently stored, in no particular order.

        Raises:
            StoreUnavailableError: If the backend cannot be read.
        """

    # --- Convenience Methods ---

    @staticmethod
    def validate_key(key: str) -> None:
        """Raise `InvalidKeyError` if ``key`` is empty or whitespace."""
        if not isinstance(key, str) or not key.strip():
            raise InvalidKeyError(f"Invalid key: {key!r}")
