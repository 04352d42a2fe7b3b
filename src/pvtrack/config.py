"""Configuration utilities for PVTRACK.

This module centralizes the settings the tracker is built with (number of
units, the checklist template, the activity log length) and the helpers that
read them, and the store location, from the environment.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_data_dir
from sqlalchemy.engine import URL

from pvtrack.domain.checklist import ChecklistTemplate
from pvtrack.domain.unit_ids import unit_ids

APP_NAME = "pvtrack"

STORE_URL_ENV = "PVTRACK_STORE_URL"  # pragma: no mutate
TOTAL_UNITS_ENV = "PVTRACK_TOTAL_UNITS"  # pragma: no mutate
ACTIVITY_LIMIT_ENV = "PVTRACK_ACTIVITY_LIMIT"  # pragma: no mutate

DEFAULT_TOTAL_UNITS = 64
DEFAULT_ACTIVITY_LIMIT = 10
DEFAULT_DB_FILENAME = "pvtrack.db"

DEFAULT_TEST_NAMES: tuple[str, ...] = (
    "TRST_TVSS01: Equipment Hard Tag",
    "TRST_TVSS02: Label Equipment Cable",
    "TRST_TVSS03: TVSS Equipment Serial Number & Firmware Check",
    "TRST_TVSS04: System Functional Test - Physical Inspection and Configuration",
    "TRST_TVSS05: Camera Configuration Check",
    "TRST_TVSS06: System Functional Test - Camera Live Image & Coverage",
    "TRST_TVSS07: NVR Configuration Check",
    "TRST_TVSS08: System Functional Test - NVR Recording Check",
    "TRST_TVSS09: High Speed Recording Check",
    "TRST_TVSS10: Wireless Client Configuration",
    "TRST_TVSS11: WL Antenna VSWR Measurement",
    "TRST_TVSS12: 50m WLAN Access",
    "TRST_TVSS13: Microphone Audio Check",
    "TRST_TVSS14: Trainborne Test (RFC 2544) for Junction Box (PV01-64)",
    "TRST_TVSS15: TVSS Agent Redundancy Check",
    "TRST_TVSS16: Throughput Test (RFC 2544) for Junction Box (PV01-64)",
    "TRST_TVSS17: DRMD Port Readiness Verification (Reserved for future use)",
    "TRST_TVSS18: IT Security Hardening",
    "TRST_TVSS19: Power ON Test",
    "TRST_TVSS20: Ring Redundancy",
)


class SettingsError(ValueError):
    """Raised when a setting read from the environment is invalid."""


@dataclass(frozen=True)
class TrackerSettings:
    """Settings every tracker component is built with.

    Tests use small values (e.g. 3 units of 2 tests) instead of the
    production 64 x 20.
    """

    total_units: int = DEFAULT_TOTAL_UNITS
    template: ChecklistTemplate = field(
        default_factory=lambda: ChecklistTemplate.from_names(DEFAULT_TEST_NAMES)
    )
    activity_limit: int = DEFAULT_ACTIVITY_LIMIT

    def __post_init__(self) -> None:
        if self.total_units < 1:
            raise SettingsError(f"total_units must be >= 1, got {self.total_units}")
        if self.activity_limit < 1:
            raise SettingsError(
                f"activity_limit must be >= 1, got {self.activity_limit}"
            )

    @property
    def unit_ids(self) -> list[str]:
        """Every configured unit id, in sequence order."""
        return unit_ids(self.total_units)

    @property
    def tests_per_unit(self) -> int:
        """Number of tests in each unit's checklist."""
        return len(self.template)


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    if not (raw := env.get(name, "").strip()):
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise SettingsError(f"{name} must be an integer, got {raw!r}") from e


def load_settings(env: Mapping[str, str] | None = None) -> TrackerSettings:
    """Build `TrackerSettings` from environment variables.

    Reads `PVTRACK_TOTAL_UNITS` and `PVTRACK_ACTIVITY_LIMIT`; unset variables
    fall back to the defaults.

    Raises:
        SettingsError: If a variable is set but not a valid value.
    """
    env = os.environ if env is None else env
    return TrackerSettings(
        total_units=_int_from_env(env, TOTAL_UNITS_ENV, DEFAULT_TOTAL_UNITS),
        activity_limit=_int_from_env(env, ACTIVITY_LIMIT_ENV, DEFAULT_ACTIVITY_LIMIT),
    )


def default_store_url() -> str:
    """Return the SQLite URL of the per-user default database."""
    data_dir = Path(user_data_dir(APP_NAME, appauthor=False, ensure_exists=True))
    return URL.create(
        "sqlite+pysqlite", database=str(data_dir / DEFAULT_DB_FILENAME)
    ).render_as_string()


def get_store_url() -> str:
    """Get the store URL from the environment.

    Returns:
        The value of `PVTRACK_STORE_URL`, or the per-user default SQLite
        database when it is unset.
    """
    return os.environ.get(STORE_URL_ENV) or default_store_url()
