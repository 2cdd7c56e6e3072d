"""REPOBUILDER DB CLI: forward-only Alembic wrappers.

Creates and inspects the repository schema the SQLAlchemy backend and the
``sweep`` command run against. Destructive operations (``downgrade``,
``stamp``) are intentionally omitted.

Behavior
- Uses programmatic Alembic configuration; human-oriented notices go to **stderr**,
  Alembic output to **stdout**.
- Schema-changing actions prompt for confirmation unless ``--force`` is given.
- ``status`` on an up-to-date schema also counts bitstream records left behind
  by tests, pointing at ``repobuilder sweep``.

Requirements
- ``REPOBUILDER_DB_URL`` must be set.
"""

from __future__ import annotations

import sys
from enum import Enum
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import func, select

from repobuilder import config
from repobuilder.adapters.db.engine import make_engine
from repobuilder.adapters.db.schema import bitstreams

from .helpers import resolve_db_url, sanitize_url, success, warn

if TYPE_CHECKING:
    from alembic.config import Config
    from sqlalchemy.engine import Engine

UPGRADE_SCHEMA_WARNING = (
    "This will upgrade the database schema to the latest version.\n"
    "Please ensure you have a backup before proceeding."
)

UPGRADE_SCHEMA_INSTRUCTIONS = "Run 'repobuilder db upgrade' to update the schema."

SWEEP_INSTRUCTIONS = "Run 'repobuilder sweep' to purge leftover bitstreams."


class MigrationStatus(Enum):
    """Migration status of the database schema."""

    UP_TO_DATE = "up to date"
    OUT_OF_DATE = "out of date"
    UNINITIALIZED = "uninitialized"


def _get_current_revision(engine: Engine) -> str | None:
    with engine.connect() as conn:
        return MigrationContext.configure(conn).get_current_revision()


def _get_head_revision(cfg: Config) -> str | None:
    return ScriptDirectory.from_config(cfg).get_current_head()


def _count_leftover_bitstreams(engine: Engine) -> tuple[int, int]:
    """Return (all, never deleted) bitstream record counts."""
    stmt = select(
        func.count(),
        func.count().filter(bitstreams.c.deleted.is_(False)),
    ).select_from(bitstreams)
    with engine.connect() as conn:
        total, live = conn.execute(stmt).one()
    return int(total), int(live)


@click.group(cls=clickx.ExtraGroup)
def db() -> None:
    """Database management commands."""


@db.command()
@click.option(
    "--verbose",
    "-v",
    "verbose",
    is_flag=True,
    help="Show alembic's more verbose output.",
)
def current(verbose: bool) -> None:
    """Show current DB revision."""
    cfg = config.build_alembic_config(db_url=resolve_db_url(), stdout=sys.stdout)
    command.current(cfg, verbose=verbose)


@db.command()
@click.option("--sql", is_flag=True, help="Generate SQL without executing.")
@click.option("--force", is_flag=True, help="Upgrade without confirmation.")
def upgrade(sql: bool, force: bool) -> None:
    """Upgrade the database to the head revision."""
    url = resolve_db_url()
    cfg = config.build_alembic_config(db_url=url, stdout=sys.stdout)
    if not force and not sql:
        warn(UPGRADE_SCHEMA_WARNING)
        click.secho(f"db: {click.style(sanitize_url(url), underline=True)}")
        click.confirm("Are you sure you want to proceed?", abort=True)
    command.upgrade(cfg, revision="head", sql=sql)
    success("Upgrade complete!")


@db.command()
def status() -> None:
    """Show database connection, schema status and leftover bitstreams."""
    url = resolve_db_url()
    head = _get_head_revision(config.build_alembic_config(db_url=url))
    engine = make_engine(url)
    leftovers: tuple[int, int] | None = None
    try:
        rev = _get_current_revision(engine)
        if rev == head:
            migration_status = MigrationStatus.UP_TO_DATE
            leftovers = _count_leftover_bitstreams(engine)
        elif rev is None:
            migration_status = MigrationStatus.UNINITIALIZED
        else:
            migration_status = MigrationStatus.OUT_OF_DATE  # pragma: nocover
    finally:
        engine.dispose()

    success("Database reachable")
    click.echo(f"Backend : {engine.dialect.name}")
    click.echo(f"URL     : {sanitize_url(url)}")
    click.echo(
        f"Schema  : {rev} ({migration_status.value})"
        if rev is not None
        else f"Schema  : {migration_status.value}"
    )
    if leftovers is not None:
        total, live = leftovers
        click.echo(f"Leftover: {total} bitstream(s), {live} never deleted")
        if total:
            warn(SWEEP_INSTRUCTIONS)
    if migration_status is not MigrationStatus.UP_TO_DATE:
        warn(UPGRADE_SCHEMA_INSTRUCTIONS)
