"""Service layer for PVTRACK.

Implements the application use-cases: the checklist store, the unit and
fleet-wide rollups, the activity log, the read-only query facade, and the
command handlers that chain them together after every mutation.

Dependency rule: may import `pvtrack.domain` and `pvtrack.interfaces`, but not
`pvtrack.adapters`, `pvtrack.bootstrap` or `pvtrack.entrypoints`.
"""
