"""Domain layer for PVTRACK.

Holds the checklist model and the pure rules that derive unit summaries and
the fleet-wide rollup from per-test records. Nothing here performs I/O.

Dependency rule: this package is independent; do not import from any other
`pvtrack.*` package.
"""
