"""Persistence session interface for REPOBUILDER.

Defines the AbstractSession contract: a context-managed, transactional view of
the persistence layer with abstract commit/rollback/close methods and an
authorization-bypass switch reserved for administrative operations.
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Iterator
from contextlib import contextmanager


class AbstractSession(abc.ABC):
    """Contract for a scoped persistence session.

    Leaving the context without calling `commit()` rolls back any pending
    changes, then closes the session.

    Side effects that cannot be rolled back (removing bytes from an asset
    store) are registered with `after_commit()` and run only once the
    transaction has committed.
    """

    def __init__(self) -> None:
        self._authorization_bypass_depth = 0
        self._after_commit: list[Callable[[], object]] = []

    def __enter__(self) -> AbstractSession:
        """Enter the session context and return the session.

        Implementations may acquire transactional resources here.
        """
        return self

    def __exit__(self, *args):
        """Exit the session context.

        Default behavior is to roll back, then close.
        """
        try:
            self.rollback()
        finally:
            self.close()

    # --- authorization ---

    @property
    def ignores_authorization(self) -> bool:
        """True while an authorization bypass is active on this session."""
        return self._authorization_bypass_depth > 0

    @contextmanager
    def authorization_bypassed(self) -> Iterator[AbstractSession]:
        """Temporarily bypass authorization checks (nestable)."""
        self._authorization_bypass_depth += 1
        try:
            yield self
        finally:
            self._authorization_bypass_depth -= 1

    # --- post-commit actions ---

    def after_commit(self, action: Callable[[], object]) -> None:
        """Run `action` after the next successful `commit()`.

        Pending actions are dropped by `rollback()` and `close()`.
        """
        self._after_commit.append(action)

    def _run_after_commit(self) -> None:
        """Run and forget the pending actions, in registration order.

        The first failing action propagates; the ones after it do not run.
        """
        actions, self._after_commit = self._after_commit, []
        for action in actions:
            action()

    def _discard_after_commit(self) -> None:
        self._after_commit.clear()

    # --- transaction ---

    @abc.abstractmethod
    def commit(self):
        """Persist changes made through this session."""

    @abc.abstractmethod
    def rollback(self):
        """Revert changes made since the last commit."""

    @abc.abstractmethod
    def close(self):
        """Release the resources held by the session. Safe to call twice."""
