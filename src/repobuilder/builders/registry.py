"""Run-scoped registry of live builders."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from .errors import DuplicateRegistrationError, InvalidPriorityError

if TYPE_CHECKING:
    from .base import Builder

logger = logging.getLogger(__name__)


class BuilderRegistry:
    """Ordered collection of every builder awaiting teardown.

    Insertion order is creation order. Each builder appears at most once;
    membership is by identity.

    Note: not thread-safe. Parallel test workers must each own a registry.
    """

    def __init__(self) -> None:
        self._builders: list[Builder] = []

    def __len__(self) -> int:
        return len(self._builders)

    def __iter__(self) -> Iterator[Builder]:
        return iter(list(self._builders))

    def __contains__(self, builder: object) -> bool:
        return any(b is builder for b in self._builders)

    def register(self, builder: Builder) -> None:
        """Append `builder`, validating its teardown priority.

        Raises:
            DuplicateRegistrationError: If `builder` is already registered.
            InvalidPriorityError: If its priority is not a positive integer.
        """
        if builder in self:
            raise DuplicateRegistrationError(builder)
        priority = builder.get_priority()
        if isinstance(priority, bool) or not isinstance(priority, int) or priority < 1:
            raise InvalidPriorityError(builder, priority)
        self._builders.append(builder)
        logger.debug("Registered %r (priority %d)", builder, priority)

    def discard(self, builder: Builder) -> bool:
        """Remove `builder` if present. Returns True if it was registered."""
        for index, registered in enumerate(self._builders):
            if registered is builder:
                del self._builders[index]
                return True
        return False

    def snapshot(self) -> list[Builder]:
        """Current builders in registration order."""
        return list(self._builders)

    def reset(self) -> None:
        """Empty the registry at the start of a cycle.

        Leftovers mean the previous cycle skipped teardown; they are logged
        and forgotten, never cleaned up here.
        """
        if self._builders:
            logger.warning(
                "Resetting registry with %d builder(s) left from a previous run: %s",
                len(self._builders),
                ", ".join(type(b).__name__ for b in self._builders),
            )
        self._builders.clear()
