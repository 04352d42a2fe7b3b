"""Helpers for parsing logger-level CLI options.

This module provides utilities used by the CLI to parse options of the
form NAME=LEVEL (repeatable or comma/space-separated). It normalizes input
values into individual items and converts/validates textual log level names
into the corresponding numeric logging levels.
"""

import logging
import re

import click

DEFAULT_LIB_LEVELS = {"sqlalchemy": logging.WARNING}


def _normalize_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Split the option value(s) on commas and whitespace, dropping empties."""
    chunks = [value] if isinstance(value, str) else list(value)
    return [s for chunk in chunks for s in re.split(r"[,\s]+", chunk) if s]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback that parses NAME=LEVEL pairs into a name->level dict.

    Combines DEFAULT_LIB_LEVELS with any overrides supplied via the CLI. Each
    item must be of the form NAME=LEVEL where LEVEL is a standard logging level
    name (e.g. DEBUG, INFO, WARNING).

    Raises:
        click.BadParameter: If an item is malformed (not NAME=LEVEL) or LEVEL is invalid.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _normalize_items(value):
        try:
            name, level_str = item.split("=", 1)
        except ValueError as e:
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}") from e
        lvl = logging.getLevelName(level_str.strip().upper())
        if not isinstance(lvl, int):
            raise click.BadParameter(f"Invalid log level: {level_str}")
        levels[name.strip()] = lvl
    return levels
