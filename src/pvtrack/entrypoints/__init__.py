"""Entrypoints (inbound adapters) for PVTRACK.

Expose the application to the outside world: currently the ``pvtrack`` CLI.
Parse and validate inputs, call the message bus and query facade, and present
results.

Dependency rule: may import `pvtrack.bootstrap` and `pvtrack.service_layer`;
avoid importing `pvtrack.adapters` directly.
"""
