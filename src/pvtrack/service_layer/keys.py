"""Key layout of the persisted state.

| Key                    | Value                                  | Writer          |
|------------------------|----------------------------------------|-----------------|
| ``testItems-<unit>``   | checklist (list of test records)       | ChecklistStore  |
| ``pv-<unit>-progress`` | completion percentage, decimal string  | UnitAggregator  |
| ``pvUnitsData``        | ``{unit: summary}`` for every unit     | UnitAggregator  |
| ``overallProgress``    | fleet-wide rollup                      | GlobalRollup    |
| ``recentActivity``     | newest-first list of activity entries  | ActivityLog     |

Every value is JSON text. Consumers treat all of them as read-only.
"""

UNITS_DATA_KEY = "pvUnitsData"
OVERALL_PROGRESS_KEY = "overallProgress"
RECENT_ACTIVITY_KEY = "recentActivity"


def checklist_key(unit_id: str) -> str:
    """Key of the checklist of ``unit_id``."""
    return f"testItems-{unit_id}"


def progress_key(unit_id: str) -> str:
    """Key of the standalone completion percentage of ``unit_id``."""
    return f"pv-{unit_id}-progress"
