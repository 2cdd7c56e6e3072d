"""Database engine factory and helpers.

Centralizes creation of SQLAlchemy Engines for the persistence backend and
applies backend-specific tuning:

- **SQLite**: connection PRAGMAs to enforce foreign keys (the referential
  rules of the repository schema depend on them), enable WAL so a builder's
  session and a teardown session can read concurrently, and wait on locks
  instead of failing immediately.
- **Other backends**: no tuning applied here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url

from . import schema  # noqa: F401 # pylint: disable=unused-import
from .metadata import metadata

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

SQLITE_NAMES = {"sqlite", "sqlite+pysqlite"}
SQLITE_BUSY_TIMEOUT_MS = 5000


def is_sqlite(url: str | URL) -> bool:
    """Return True if the given SQLAlchemy URL or string corresponds to SQLite.

    Args:
        url: A database URL string or SQLAlchemy :class:`URL`.

    Returns:
        bool: True if the backend is SQLite, otherwise False.
    """
    u = make_url(str(url))
    return u.get_backend_name() in SQLITE_NAMES


def make_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy Engine for the given URL.

    If the backend is SQLite, applies on every new connection:
        - ``foreign_keys=ON`` (enforce referential integrity)
        - ``journal_mode=WAL`` (readers don't block the writer)
        - ``synchronous=NORMAL`` (balanced durability)
        - ``busy_timeout`` (wait for competing writers)

    Args:
        url: Database connection URL (str or :class:`URL`).
        echo: If True, log SQL statements.

    Returns:
        Engine: Configured SQLAlchemy Engine.
    """

    engine = create_engine(url, echo=echo)

    if is_sqlite(url):

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore #pylint: disable=W0613
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON;")
            cur.execute("PRAGMA journal_mode=WAL;")
            cur.execute("PRAGMA synchronous=NORMAL;")
            cur.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")
            cur.close()

    return engine


def create_schema(engine: Engine) -> None:
    """Create every repository table that does not exist yet.

    Bypasses Alembic; meant for throwaway test databases. Use
    ``repobuilder db upgrade`` for databases that need migration history.
    """
    metadata.create_all(engine)


def drop_schema(engine: Engine) -> None:
    """Drop every repository table."""
    metadata.drop_all(engine)
