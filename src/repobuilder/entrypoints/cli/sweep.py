"""``repobuilder sweep``: purge leftover bitstreams from a shared database.

Runs the same leak sweep a builder run ends with, against the database named
by ``REPOBUILDER_DB_URL`` and the asset store directory given by
``--assetstore``. Useful after an interrupted test session left records
behind.

Exit codes
- 0: storage is clean (possibly after purging soft-deleted bitstreams).
- 1: the sweep could not enumerate or purge bitstreams.
- 3: bitstreams that were never deleted were found (``--strict``, default).
  They have been purged anyway.

Purged bitstream ids are printed to **stdout**, one per line.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from repobuilder.bootstrap import sweep_storage
from repobuilder.builders.errors import LeakDetectedError, LeakSweepError

from .helpers import error, resolve_db_url, success, warn

logger = logging.getLogger(__name__)

LEAK_EXIT_CODE = 3


@click.command()
@click.option(
    "--assetstore",
    "assetstore_dir",
    type=click.Path(file_okay=False, path_type=Path),
    required=True,
    envvar="REPOBUILDER_ASSETSTORE_DIR",
    show_envvar=True,
    help="Root directory of the local asset store holding bitstream bytes.",
)
@click.option(
    "--strict/--lenient",
    default=True,
    show_default=True,
    help=(
        "With --strict, bitstreams that were never deleted fail the command "
        f"(exit code {LEAK_EXIT_CODE}). With --lenient they are only reported."
    ),
)
@click.pass_context
def sweep(ctx: click.Context, assetstore_dir: Path, strict: bool) -> None:
    """Expunge every bitstream record and its bytes."""
    url = resolve_db_url()
    try:
        report = sweep_storage(url, assetstore_dir, strict=strict)
    except LeakDetectedError as e:
        for bitstream_id in e.bitstream_ids:
            click.echo(bitstream_id)
        error(str(e))
        ctx.exit(LEAK_EXIT_CODE)
    except LeakSweepError as e:
        raise click.ClickException(f"Leak sweep failed: {e}") from e

    for bitstream_id in report.purged:
        click.echo(bitstream_id)
    if report.clean:
        success("No leftover bitstreams.")
    elif report.undeleted:
        warn(f"Purged {len(report.undeleted)} bitstream(s) that were never deleted.")
    else:
        success(f"Expunged {len(report.purged)} deleted bitstream(s).")
