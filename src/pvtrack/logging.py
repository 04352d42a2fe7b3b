"""Logging setup for the PVTRACK CLI.

Console output goes through Rich on stderr at a level picked with -v/-q. The
flight recorder keeps the most recent records at DEBUG in memory and dumps
them to a file as soon as a WARNING arrives, so a failed toggle leaves the
whole write chain on disk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from logging.handlers import MemoryHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

PROJECT_PREFIX = "pvtrack"
DEFAULT_CONSOLE_LEVEL = logging.WARNING
LEVEL_STEP = 10
FLIGHT_RECORDER_FORMAT = "[%(asctime)s] %(levelname)s %(name)s:%(lineno)d: %(message)s"


class ThirdPartyPrefixFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Set ``record.prefix`` to ``[sqlalchemy]`` and the like on foreign records."""

    def filter(self, record: logging.LogRecord) -> bool:
        top = record.name.split(".")[0]
        record.prefix = "" if top == PROJECT_PREFIX else f"[{top}]"
        return True


@dataclass(frozen=True)
class LoggingOptions:
    """Resolved values of the CLI's global logging options.

    ``log_path`` is None when the flight recorder is disabled.
    """

    verbose: int = 0
    quiet: int = 0
    debug: bool = False
    color: bool = True
    log_path: Path | None = None
    flight_capacity: int = 2000
    force_flush: bool = False
    logger_levels: dict[str, int] = field(default_factory=dict)

    @property
    def console_level(self) -> int:
        if self.debug:
            return logging.DEBUG
        level = DEFAULT_CONSOLE_LEVEL + LEVEL_STEP * (self.quiet - self.verbose)
        return max(logging.DEBUG, min(logging.CRITICAL, level))


def console_handler(level: int, *, debug: bool = False, color: bool = True) -> RichHandler:
    """Rich handler on stderr; ``debug`` adds timestamps and source paths."""
    handler = RichHandler(
        level=level,
        console=Console(color_system="auto" if color else None, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug,
    )
    if debug:
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s: %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(prefix)s %(message)s"))
        handler.addFilter(ThirdPartyPrefixFilter())
    return handler


def flight_recorder(
    path: Path, capacity: int, *, flush_on_close: bool = False
) -> MemoryHandler:
    """Buffer ``capacity`` records; write them to ``path`` on WARNING or above."""
    path.parent.mkdir(parents=True, exist_ok=True)
    target = logging.FileHandler(path, mode="w", encoding="utf-8", delay=True)
    target.setFormatter(logging.Formatter(FLIGHT_RECORDER_FORMAT))
    return MemoryHandler(
        capacity,
        flushLevel=logging.WARNING,
        target=target,
        flushOnClose=flush_on_close,
    )


def configure_logging(options: LoggingOptions) -> list[logging.Handler]:
    """Replace the root logger's handlers according to ``options``."""
    handlers: list[logging.Handler] = [
        console_handler(options.console_level, debug=options.debug, color=options.color)
    ]
    if options.log_path is not None:
        handlers.append(
            flight_recorder(
                options.log_path,
                options.flight_capacity,
                flush_on_close=options.force_flush,
            )
        )
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, level in options.logger_levels.items():
        logging.getLogger(name).setLevel(level)
    return handlers


def log_startup(
    logger: logging.Logger, options: LoggingOptions, *, version: str, store_url: str
) -> None:
    logger.info(
        "PVTRACK %s: console=%s, flight-recorder=%s",
        version,
        logging.getLevelName(options.console_level),
        "OFF" if options.log_path is None else "ON",
    )
    logger.debug("Store: %s", store_url)
    if options.log_path is not None:
        logger.debug(
            "Flight recorder: path=%s, capacity=%d",
            options.log_path,
            options.flight_capacity,
        )
    logger.debug(
        "Per-logger overrides: %s",
        {name: logging.getLevelName(lvl) for name, lvl in options.logger_levels.items()}
        or "<none>",
    )
