"""In-memory session with an undo journal."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, TypeVar

from repobuilder.domain.model import RepositoryObject
from repobuilder.interfaces.session import AbstractSession

from .store import InMemoryRepositoryData

R = TypeVar("R", bound=RepositoryObject)

_MISSING = object()


class SessionClosedError(RuntimeError):
    """Raised when a closed session is used."""


class InMemorySession(AbstractSession):
    """Session over `InMemoryRepositoryData`.

    Writes are applied to the shared tables immediately (other sessions see
    them at once, like READ UNCOMMITTED) and recorded in a journal. `commit()`
    forgets the journal and runs the post-commit actions; `rollback()` replays
    the journal backwards.
    """

    def __init__(self, data: InMemoryRepositoryData) -> None:
        super().__init__()
        self.data = data
        self.commits = 0
        self.closed = False
        self._journal: list[tuple[str, str, object]] = []

    # --- table access used by the memory services ---

    def rows(self, table: str) -> Mapping[str, Any]:
        """Read-only view of a table."""
        self._ensure_open()
        return MappingProxyType(self.data.table(table))

    def get(self, table: str, record_id: str) -> Any:
        """Return the record with `record_id` from `table`, or None."""
        self._ensure_open()
        return self.data.table(table).get(record_id)

    def put(self, table: str, record: R) -> R:
        """Insert or replace a record, journaling the previous value."""
        self._ensure_open()
        rows = self.data.table(table)
        self._journal.append((table, record.id, rows.get(record.id, _MISSING)))
        rows[record.id] = record
        return record

    def discard(self, table: str, record_id: str) -> None:
        """Remove a record if present, journaling the previous value."""
        self._ensure_open()
        rows = self.data.table(table)
        if record_id in rows:
            self._journal.append((table, record_id, rows.pop(record_id)))

    # --- AbstractSession ---

    def commit(self):
        self._ensure_open()
        self._journal.clear()
        self.commits += 1
        self._run_after_commit()

    def rollback(self):
        self._discard_after_commit()
        while self._journal:
            table, record_id, previous = self._journal.pop()
            rows = self.data.table(table)
            if previous is _MISSING:
                rows.pop(record_id, None)
            else:
                rows[record_id] = previous  # type: ignore[assignment]

    def close(self):
        self._discard_after_commit()
        self.closed = True

    def _ensure_open(self) -> None:
        if self.closed:
            raise SessionClosedError("session is closed")
