"""Unit identifier scheme.

Units are numbered ``1..total_units`` and identified by their zero-padded
sequence number: ``"01"`` .. ``"64"`` for the default train. The padding width
is two digits, widened only when the configured total needs more.
"""

import re

from pvtrack.domain.errors import InvalidUnitIdError

MIN_WIDTH = 2
LABEL_PREFIX = "PV"

_UNIT_ID_RE = re.compile(r"^(?:pv)?\s*(\d+)$", re.IGNORECASE | re.ASCII)


def id_width(total_units: int) -> int:
    """Return the zero-padding width used for ``total_units`` units."""
    return max(MIN_WIDTH, len(str(total_units)))


def format_unit_id(number: int, total_units: int) -> str:
    """Format a unit sequence number as its zero-padded id.

    Raises:
        InvalidUnitIdError: If ``number`` is outside ``1..total_units``.
    """
    if not 1 <= number <= total_units:
        raise InvalidUnitIdError(number, total_units)
    return str(number).zfill(id_width(total_units))


def unit_ids(total_units: int) -> list[str]:
    """Return every unit id in sequence order."""
    return [format_unit_id(n, total_units) for n in range(1, total_units + 1)]


def normalize_unit_id(value: str, total_units: int) -> str:
    """Normalize user input such as ``"5"``, ``"05"`` or ``"PV5"`` to ``"05"``.

    Raises:
        InvalidUnitIdError: If the value is not a unit number in range.
    """
    if not (match := _UNIT_ID_RE.match(value.strip())):
        raise InvalidUnitIdError(value, total_units)
    return format_unit_id(int(match.group(1)), total_units)


def unit_label(unit_id: str) -> str:
    """Display label of a unit, e.g. ``"PV05"``."""
    return f"{LABEL_PREFIX}{unit_id}"
