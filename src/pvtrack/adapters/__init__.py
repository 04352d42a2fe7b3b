"""Adapters (infrastructure) for PVTRACK.

Provide concrete implementations of the application ports (key-value stores,
clocks), plus persistence mapping and related wiring (engines, metadata).

Dependency rule: may import `pvtrack.interfaces` and `pvtrack.domain`; neither
of those may import this package.
"""
