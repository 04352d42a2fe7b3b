"""JSON reads and writes against the key-value store.

`read_json` and `write_json` implement the recovery policy of the service
layer: a failed or undecodable read is logged and reported as "no value", and
a failed write is logged and reported as ``False``. Callers that rewrite what
they read use `fetch_json` instead, which lets a failed read propagate so it
is never mistaken for a missing key.
"""

import json
import logging
from typing import Any

from pvtrack.interfaces.kv_store import KeyValueStore, KeyValueStoreError

logger = logging.getLogger(__name__)

JSON_SEPARATORS = (",", ":")


async def fetch_json(store: KeyValueStore, key: str) -> Any | None:
    """Return the decoded JSON value under ``key``, or None if absent or undecodable.

    Raises:
        KeyValueStoreError: If the store read fails.
    """
    raw = await store.get_item(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error("Discarding undecodable value under %s: %s", key, e)
        return None


async def read_json(store: KeyValueStore, key: str) -> Any | None:
    """Return the decoded JSON value under ``key``, or None.

    None covers a missing key, a store read failure and an undecodable value.
    """
    try:
        return await fetch_json(store, key)
    except KeyValueStoreError:
        logger.exception("Failed to read %s from the store", key)
        return None


async def write_json(store: KeyValueStore, key: str, value: Any) -> bool:
    """Encode ``value`` as JSON and store it under ``key``.

    Returns:
        True if the value was written, False if the store rejected it.
    """
    payload = json.dumps(value, separators=JSON_SEPARATORS)
    try:
        await store.set_item(key, payload)
    except KeyValueStoreError:
        logger.exception("Failed to write %s to the store", key)
        return False
    logger.debug("Wrote %s (%d bytes)", key, len(payload))
    return True
