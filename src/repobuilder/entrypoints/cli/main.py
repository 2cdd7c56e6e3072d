"""REPOBUILDER CLI entry point.

Defines the top-level ``repobuilder`` command (via Click-Extra), which
configures logging for every subcommand, and registers the subcommands.

Available commands
- ``repobuilder db``: forward-only schema management (upgrade/current/status).
- ``repobuilder sweep``: purge leftover bitstreams from a shared database.

Examples
    $ repobuilder --version
    $ repobuilder db upgrade
    $ repobuilder -v sweep --assetstore /srv/assetstore
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from repobuilder import __version__
from repobuilder.logging import configure_logging, effective_level, log_startup

from .db import db as db_group
from .helpers.log_level_parser import parse_log_level
from .sweep import sweep as sweep_command

logger = logging.getLogger(__name__)


HELP = """REPOBUILDER command-line interface.

    Maintenance commands for the repository that integration-test builders
    create their communities, collections, items, accounts and bitstreams in:
    schema migrations, and the leak sweep that purges bitstreams tests left
    behind.
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
    default=Path(user_log_dir("repobuilder", appauthor=False)) / "latest.log",
    envvar="REPOBUILDER_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="REPOBUILDER_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Keep the last N log records at DEBUG granularity (unaffected by -v/-q) "
        "and write them to --log-path when a WARNING/ERROR occurs, e.g. a "
        "sweep that finds leaked bitstreams, or on clean exit with --force-flush."
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
        "console and flight-recorder. Repeatable (e.g. -L sqlalchemy=INFO "
        "-L repobuilder.builders=DEBUG)."
    ),
    default=("sqlalchemy=WARNING", "alembic=WARNING"),
    show_default=True,
    show_envvar=True,
)
@clickx.pass_context
def repobuilder(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """REPOBUILDER command-line interface."""
    level = effective_level(verbose_count, quiet_count)
    recorder_path = log_path if flight_recorder else None

    handlers = configure_logging(
        level=level,
        debug=debug,
        color=ctx.color is not False,  # None or True => allow color
        log_path=recorder_path,
        flight_capacity=flight_recorder_capacity,
        force_flush=force_flush_flight_recorder,
        logger_levels=logger_levels,
    )

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=recorder_path,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        force_flush_fr=force_flush_flight_recorder,
        logger_levels=logger_levels,
    )

    ctx.call_on_close(logging.shutdown)


repobuilder.add_command(db_group)
repobuilder.add_command(sweep_command)
