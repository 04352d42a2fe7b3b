"""Contract tests.

Purpose
- Define the `KeyValueStore` behavior once and run it against every adapter
  (memory, local files, SQLite) to keep them interchangeable.

Guidelines
- Parametrize implementations via fixtures.
- Assert only the public contract (inputs/outputs/effects), not internals.
"""
