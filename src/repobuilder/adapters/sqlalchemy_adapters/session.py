"""SQLAlchemy-backed session for REPOBUILDER.

Provides a context-managed session using a SQLAlchemy Connection. The
connection is opened lazily so a long-lived builder session costs nothing
until it is first used.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from repobuilder.interfaces.session import AbstractSession

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine


class SqlAlchemySession(AbstractSession):
    """SQLAlchemy-backed session."""

    def __init__(self, engine: Engine):
        super().__init__()
        self.engine = engine
        self._connection: Connection | None = None

    @property
    def connection(self) -> Connection:
        """The session's connection, opened on first access."""
        if self._connection is None:
            self._connection = self.engine.connect()
        return self._connection

    def __enter__(self):
        if self._connection is None:
            self._connection = self.engine.connect()
        return super().__enter__()

    def commit(self):
        if self._connection is not None:
            self._connection.commit()
        self._run_after_commit()

    def rollback(self):
        self._discard_after_commit()
        if self._connection is not None:
            self._connection.rollback()

    def close(self):
        self._discard_after_commit()
        if self._connection is not None:
            self._connection.close()
            self._connection = None
