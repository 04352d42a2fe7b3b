"""Local filesystem-based key-value store adapter.

Each key is stored in its own file ``<root>/<key>.value`` (UTF-8). Writes go
to a temporary file in the same directory and are moved into place with
``os.replace`` so a crash never leaves a half-written value behind.
"""

import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from pvtrack.interfaces.kv_store import (
    InvalidKeyError,
    KeyValueStore,
    StoreUnavailableError,
)

SUFFIX = ".value"
ENCODING = "utf-8"
FORBIDDEN_KEY_CHARS = frozenset('/\\:*?"<>|\0')


class LocalKeyValueStore(KeyValueStore):
    """KeyValueStore implementation that uses one file per key."""

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        """Directory holding the value files."""
        return self._root

    # --- Core Operations ---

    async def get_item(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            return path.read_text(encoding=ENCODING)
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StoreUnavailableError(f"Cannot read {key!r}: {e}") from e

    async def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding=ENCODING, dir=self._root, delete=False, suffix=".tmp"
            ) as tmp:  # pragma: no mutate
                tmp.write(value)
                tmp_path = Path(tmp.name)
            os.replace(tmp_path, path)
        except OSError as e:
            raise StoreUnavailableError(f"Cannot write {key!r}: {e}") from e

    async def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StoreUnavailableError(f"Cannot remove {key!r}: {e}") from e

    async def keys(self) -> Iterable[str]:
        try:
            return [p.name[: -len(SUFFIX)] for p in self._root.glob(f"*{SUFFIX}")]
        except OSError as e:
            raise StoreUnavailableError(f"Cannot list {self._root}: {e}") from e

    # --- Internal Helpers ---

    def _path_for(self, key: str) -> Path:
        self._validate_local_key(key)
        return self._root / f"{key}{SUFFIX}"

    def _validate_local_key(self, key: str) -> None:
        """Raise InvalidKeyError if the key cannot be used as a file name.

        Enforced:
        - Non-empty
        - No path separators or characters reserved on common filesystems
        - Not a relative path component (``.`` / ``..``)
        """
        self.validate_key(key)
        if FORBIDDEN_KEY_CHARS.intersection(key):
            raise InvalidKeyError(f"Key {key!r} contains reserved characters")
        if key in {".", ".."}:  # pylint: disable=magic-value-comparison
            raise InvalidKeyError(f"Key {key!r} is not a valid file name")
