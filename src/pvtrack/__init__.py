"""PVTRACK

Progress tracking for the TVSS verification checklist of every PV unit on a
CCL train. Per-test status is persisted in a simple key-value store and the
per-unit, fleet-wide and recent-activity rollups are re-derived from it after
every change.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
