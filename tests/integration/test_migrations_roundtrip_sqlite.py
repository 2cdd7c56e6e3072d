"""Alembic round-trip smoke test for SQLite.

This test exercises the full *upgrade → downgrade* path against a temporary,
file-backed SQLite database to ensure:
  - `upgrade head` creates the repository tables, and
  - `downgrade base` drops them.

We use a file (not :memory:) so Alembic's schema changes persist across
connections within the test.
"""

from __future__ import annotations

from pathlib import Path

from alembic import command
from sqlalchemy import create_engine, text

from repobuilder import config
from repobuilder.adapters.assetstore import LocalAssetStore
from repobuilder.bootstrap import sqlalchemy_services

# mypy: disable-error-code=no-untyped-def

REPOSITORY_TABLES = {"communities", "collections", "epersons", "items", "bitstreams"}


def _tables(engine) -> set[str]:
    with engine.begin() as c:
        rows = c.execute(
            text("SELECT name FROM sqlite_master WHERE type='table'")
        ).fetchall()
    return {row[0] for row in rows}


def test_alembic_upgrade_downgrade_roundtrip_sqlite_tmp(tmp_path: Path):
    """Upgrade to head (assert tables exist) → downgrade to base (assert dropped).

    Uses `sqlite_master` to introspect table presence, which is stable on SQLite.
    """

    url = f"sqlite:///{tmp_path / 'repobuilder.db'}"
    command.upgrade(config.build_alembic_config(url), "head")
    eng = create_engine(url, future=True)

    assert REPOSITORY_TABLES <= _tables(eng), "tables should exist after upgrade"

    command.downgrade(config.build_alembic_config(url), "base")

    assert not REPOSITORY_TABLES & _tables(eng), "tables should be dropped after downgrade"

    eng.dispose()


def test_migrated_schema_accepts_builder_records(sqlite_engine_migrated, tmp_path):
    """The migrated schema is usable by the SQLAlchemy services."""
    handles = sqlalchemy_services(
        sqlite_engine_migrated, LocalAssetStore(tmp_path / "assetstore")
    )()
    with handles.new_session() as session:
        community = handles.communities.create(session, "Migrated")
        collection = handles.collections.create(session, "Works", community)
        handles.items.create(session, "Item", collection)
        session.commit()

    with handles.new_session() as session:
        assert handles.communities.find(session, community.id) == community
