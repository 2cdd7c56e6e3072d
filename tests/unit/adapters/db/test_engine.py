"""Unit tests for the database engine helpers.

These tests cover:
- Detection of SQLite vs. non-SQLite URLs.
- Application of SQLite PRAGMAs on connect.
- Creating and dropping the repository schema without Alembic.
"""

from typing import TYPE_CHECKING

from sqlalchemy import inspect
from sqlalchemy.engine import make_url

from repobuilder.adapters.db.engine import drop_schema, is_sqlite

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

TABLES = {"bitstreams", "collections", "communities", "epersons", "items"}


def test_is_sqlite_true_for_sqlite_url():
    """is_sqlite() should return True for SQLite URLs."""
    assert is_sqlite("sqlite:///:memory:")
    assert is_sqlite(make_url("sqlite+pysqlite:///file.db"))


def test_is_sqlite_false_for_postgres_url():
    """is_sqlite() should return False for non-SQLite URLs (e.g., Postgres)."""
    assert not is_sqlite("postgresql://u:p@localhost/db")
    assert not is_sqlite(make_url("postgresql+psycopg://u:p@localhost/db"))


def test_sqlite_pragmas_applied(sqlite_engine_file: "Engine"):
    """SQLite engines created by make_engine() should apply expected PRAGMAs."""
    with sqlite_engine_file.connect() as cxn:
        fk = cxn.exec_driver_sql("PRAGMA foreign_keys;").scalar()
        jm = cxn.exec_driver_sql("PRAGMA journal_mode;").scalar()
        sync = cxn.exec_driver_sql("PRAGMA synchronous;").scalar()
        busy = cxn.exec_driver_sql("PRAGMA busy_timeout;").scalar()
    assert fk == 1
    assert jm is not None and jm.lower() == "wal"
    assert sync == 1  # NORMAL
    assert busy == 5000


def test_create_and_drop_schema(sqlite_engine_file: "Engine"):
    """create_schema() (run by the fixture) makes every table; drop_schema() removes them."""
    assert TABLES <= set(inspect(sqlite_engine_file).get_table_names())
    drop_schema(sqlite_engine_file)
    assert not TABLES & set(inspect(sqlite_engine_file).get_table_names())
