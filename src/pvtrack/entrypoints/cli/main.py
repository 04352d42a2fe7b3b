"""PVTRACK CLI entry point.

Defines the top-level ``pvtrack`` command (via Click-Extra) and registers
the progress subcommands.

Available commands
- ``pvtrack status`` / ``units`` / ``show`` / ``activity``: read-only views.
- ``pvtrack toggle``: advance one test of one unit along its status cycle.
- ``pvtrack rebuild``: recompute every unit summary and the global rollup.
- ``pvtrack watch``: redraw the dashboard on an interval.

Notes
- The CLI version is sourced from `pvtrack.__version__` and displayed
  automatically by Click-Extra (``--version``).
- The store is opened lazily, by the first subcommand that needs it.

Examples
    $ pvtrack --version
    $ pvtrack --store-url memory:// status
    $ pvtrack toggle PV05 3
"""

import dataclasses
import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from pvtrack import __version__, config
from pvtrack.logging import LoggingOptions, configure_logging, log_startup

from .context import CliState
from .helpers import sanitize_store_url
from .helpers.log_level_parser import parse_log_level
from .progress import activity, rebuild, show, status, toggle, units, watch

logger = logging.getLogger(__name__)


HELP = """PVTRACK command-line interface.

    PVTRACK tracks commissioning of the PV units of a train: each unit carries
    a fixed checklist of tests, and every test moves through not started, in
    progress and completed. Per-unit and train-wide completion are kept up to
    date in a key-value store on every change.
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help=(
        "Increase the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help=(
        "Decrease the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (enables extra developer diagnostics beyond -vvv).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to log file (overrides default flight recorder path).",
    default=Path(user_log_dir(config.APP_NAME, appauthor=False)) / "latest.log",
    envvar="PVTRACK_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="PVTRACK_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Enable the in-memory flight recorder. Keeps the last N log records "
        "at DEBUG granularity (unaffected by -v/-q) and writes them to "
        "--log-path when a WARNING/ERROR occurs, or on clean exit if "
        "--force-flush is set."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help="Force-flush the flight recorder buffer to --log-path on program exit.",
    default=False,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set MINIMUM LEVEL for specific LOGGERS (NAME=LEVEL). Applies to both "
        "console and flight-recorder. Repeatable (e.g. -L sqlalchemy=INFO)."
    ),
    default=("sqlalchemy=WARNING",),
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--store-url",
    envvar=config.STORE_URL_ENV,
    show_envvar=True,
    help=(
        "Where progress is stored: memory://, file:///some/dir, or a "
        "SQLAlchemy database URL. Defaults to a per-user SQLite database."
    ),
)
@click.option(
    "--total-units",
    type=click.IntRange(min=1),
    envvar=config.TOTAL_UNITS_ENV,
    show_envvar=True,
    help=f"Number of PV units in the train [default: {config.DEFAULT_TOTAL_UNITS}].",
)
@clickx.pass_context
def pvtrack(  # pylint: disable=too-many-arguments, too-many-locals, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
    store_url: str | None,
    total_units: int | None,
) -> None:
    """PVTRACK command-line interface."""

    log_options = LoggingOptions(
        verbose=verbose_count,
        quiet=quiet_count,
        debug=debug,
        color=ctx.color is not False,  # None or True => allow color
        log_path=log_path if flight_recorder else None,
        flight_capacity=flight_recorder_capacity,
        force_flush=force_flush_flight_recorder,
        logger_levels=logger_levels,
    )
    configure_logging(log_options)

    try:
        settings = config.load_settings()
        if total_units is not None:
            settings = dataclasses.replace(settings, total_units=total_units)
    except config.SettingsError as e:
        raise click.ClickException(str(e)) from e
    store_url = store_url or config.get_store_url()

    log_startup(
        logger,
        log_options,
        version=__version__,
        store_url=sanitize_store_url(store_url),
    )

    ctx.obj = CliState(store_url=store_url, settings=settings)
    ctx.call_on_close(logging.shutdown)


for command in (status, units, show, toggle, activity, rebuild, watch):
    pvtrack.add_command(command)
