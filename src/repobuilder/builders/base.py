"""Builder base class.

A builder creates exactly one repository record for a test and knows how to
remove it again. Every builder registers itself with the run's
`BuilderRegistry` while it is being constructed; the `TeardownCoordinator`
later calls `cleanup()` on each, highest `get_priority()` first.

Subclasses implement `get_service()`, `_create()` and, when the service's
plain `delete` is not the right inverse, `_delete()`. State a subclass needs
in `get_priority()` must be assigned before calling `super().__init__()`,
because registration happens there.
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar, cast

from repobuilder.domain.errors import DomainError
from repobuilder.domain.model import RepositoryObject
from repobuilder.interfaces.services import RecordService

from .errors import CreationError, DeletionError

if TYPE_CHECKING:
    from repobuilder.interfaces.session import AbstractSession

    from .locator import ServiceHandles, ServiceLocator
    from .registry import BuilderRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=RepositoryObject)
S = TypeVar("S", bound=RecordService)

DEFAULT_PRIORITY = 100


@dataclass(frozen=True)
class BuildResult(Generic[T]):
    """Outcome of a tolerant build: either a value or the error that prevented it.

    Exactly one of `value` and `error` is set.
    """

    value: T | None = None
    error: CreationError | None = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.error is None):
            raise ValueError("BuildResult needs exactly one of value or error")

    @property
    def ok(self) -> bool:
        """True if the build produced a value."""
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the creation error."""
        if self.error is not None:
            raise self.error
        return cast(T, self.value)


class Builder(abc.ABC, Generic[T, S]):
    """Creates one record of type `T` through a service of type `S`.

    Args:
        session: Session the builder creates and deletes through (normally the
            test's session).
        registry: Registry of the current run; the builder registers itself.
        locator: Service locator of the current run.
    """

    def __init__(
        self,
        session: AbstractSession,
        *,
        registry: BuilderRegistry,
        locator: ServiceLocator,
    ) -> None:
        self.session = session
        self.registry = registry
        self.locator = locator
        self.created: T | None = None
        registry.register(self)

    def __repr__(self) -> str:
        created = self.created.id if self.created is not None else None
        return f"<{type(self).__name__} created={created}>"

    # --- contract ---

    def get_priority(self) -> int:
        """Teardown priority; higher values are cleaned up sooner.

        Must be a positive integer. Override in builders whose records other
        records depend on, so dependents are removed first.
        """
        return DEFAULT_PRIORITY

    @abc.abstractmethod
    def get_service(self) -> S:
        """The domain service this builder delegates to."""

    @abc.abstractmethod
    def _create(self, session: AbstractSession) -> T:
        """Create the record through the service. May raise DomainError."""

    def _delete(self, session: AbstractSession, record: T) -> None:
        """Reverse `_create` for `record`. May raise DomainError."""
        self.get_service().delete(session, record)

    # --- public API ---

    @property
    def services(self) -> ServiceHandles:
        """Handles of the current run (fails fast outside a run)."""
        return self.locator.handles

    def build(self) -> T:
        """Create the record, commit it and index it.

        Raises:
            CreationError: If the services reject the record, or the builder
                has already built one. The builder stays registered.
        """
        if self.created is not None:
            raise CreationError(self, f"already built {self.created.id}")
        try:
            record = self._create(self.session)
        except DomainError as e:
            self.session.rollback()
            raise CreationError(self, str(e)) from e

        self.session.commit()
        self.created = record
        indexing = self.services.indexing
        indexing.index(self.session, record)
        indexing.commit()
        logger.debug("%s built %s", type(self).__name__, record.id)
        return record

    def try_build(self) -> BuildResult[T]:
        """Build, logging and returning a failure instead of raising it."""
        try:
            return BuildResult(value=self.build())
        except CreationError as e:
            logger.exception("%s", e)
            return BuildResult(error=e)

    def delete(self, record: T) -> None:
        """Delete `record` through the builder's session and commit.

        Deleting a record that is already gone is a no-op.

        Raises:
            DeletionError: If the services refuse the deletion.
        """
        try:
            self._delete(self.session, record)
        except DomainError as e:
            self.session.rollback()
            raise DeletionError(self, str(e)) from e
        self.session.commit()
        self._unindex(self.session, record.id)

    def cleanup(self) -> None:
        """Teardown hook: remove whatever this builder created.

        Runs in a fresh session with authorization bypassed, reloads the
        record and deletes it if it still exists.

        Raises:
            DeletionError: If the services refuse the deletion.
        """
        if self.created is None:
            return

        record_id = self.created.id
        with self.services.new_session() as session:
            with session.authorization_bypassed():
                current = self.get_service().find(session, record_id)
                if current is not None:
                    try:
                        self._delete(session, current)
                    except DomainError as e:
                        raise DeletionError(self, str(e)) from e
            session.commit()
            self._unindex(session, record_id)
        logger.debug("%s cleaned up %s", type(self).__name__, record_id)

    # --- helpers ---

    def _unindex(self, session: AbstractSession, record_id: str) -> None:
        indexing = self.services.indexing
        indexing.unindex(session, record_id)
        indexing.commit()
