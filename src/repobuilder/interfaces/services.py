"""Domain service ports.

One service per repository record kind. Every operation takes the session it
runs under as its first argument; services never open sessions themselves.

Shared contract
---------------
- `create(...)` returns the persisted record. Raises `EntityNotFoundError` for
  a missing parent, `DuplicateEntityError` for a taken unique field.
- `find(session, id)` returns the current record or None.
- `delete(session, record)` removes the record. Deleting a record that is
  already gone is a no-op. Raises `ReferentialIntegrityError` if other records
  still depend on it.

Bitstreams differ: `delete` only soft-deletes (`deleted=True`) and leaves the
bytes in the asset store; `expunge` physically removes record and bytes and
requires an authorization bypass on the session.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence
from typing import TYPE_CHECKING, BinaryIO, Generic, TypeVar

from repobuilder.domain.model import (
    Bitstream,
    Collection,
    Community,
    EPerson,
    Item,
    RepositoryObject,
)

if TYPE_CHECKING:
    from .session import AbstractSession

R = TypeVar("R", bound=RepositoryObject)


class RecordService(abc.ABC, Generic[R]):
    """Lookup and removal shared by every record kind."""

    KIND: str = "record"

    @abc.abstractmethod
    def find(self, session: AbstractSession, record_id: str) -> R | None:
        """Return the record with `record_id`, or None if it does not exist."""

    @abc.abstractmethod
    def delete(self, session: AbstractSession, record: R) -> None:
        """Delete `record`.

        Raises:
            ReferentialIntegrityError: If other records still depend on it.
        """


class CommunityService(RecordService[Community]):
    """Community persistence."""

    KIND = "Community"

    @abc.abstractmethod
    def create(
        self, session: AbstractSession, name: str, parent: Community | None = None
    ) -> Community:
        """Create a community, optionally nested under `parent`."""


class CollectionService(RecordService[Collection]):
    """Collection persistence."""

    KIND = "Collection"

    @abc.abstractmethod
    def create(
        self, session: AbstractSession, name: str, community: Community
    ) -> Collection:
        """Create a collection owned by `community`."""


class ItemService(RecordService[Item]):
    """Item persistence."""

    KIND = "Item"

    @abc.abstractmethod
    def create(
        self,
        session: AbstractSession,
        title: str,
        collection: Collection,
        submitter: EPerson | None = None,
    ) -> Item:
        """Create an item in `collection`."""


class EPersonService(RecordService[EPerson]):
    """User account persistence."""

    KIND = "EPerson"

    @abc.abstractmethod
    def create(  # pylint: disable=too-many-arguments
        self,
        session: AbstractSession,
        email: str,
        *,
        first_name: str = "",
        last_name: str = "",
        can_log_in: bool = True,
    ) -> EPerson:
        """Create an account. E-mail addresses are unique (case-insensitive)."""

    @abc.abstractmethod
    def find_by_email(self, session: AbstractSession, email: str) -> EPerson | None:
        """Return the account registered under `email`, or None."""


class BitstreamService(RecordService[Bitstream]):
    """Bitstream persistence, including the soft-delete/expunge split."""

    KIND = "Bitstream"

    @abc.abstractmethod
    def create(  # pylint: disable=too-many-arguments
        self,
        session: AbstractSession,
        fileobj: BinaryIO,
        *,
        name: str,
        mime_type: str = "application/octet-stream",
        item: Item | None = None,
    ) -> Bitstream:
        """Store the bytes of `fileobj` and create a record pointing at them."""

    @abc.abstractmethod
    def find_all(self, session: AbstractSession) -> Sequence[Bitstream]:
        """Return every bitstream record, soft-deleted ones included."""

    @abc.abstractmethod
    def expunge(self, session: AbstractSession, bitstream: Bitstream) -> None:
        """Physically remove a soft-deleted bitstream record and its bytes.

        The bytes are removed once the session commits, and only if no other
        record still references the same digest. A rollback keeps them.

        Raises:
            AuthorizationError: If the session is not bypassing authorization.
            BitstreamNotDeletedError: If the bitstream is not soft-deleted.
        """


class IndexingService(abc.ABC):
    """Search index fed by the builders."""

    @abc.abstractmethod
    def index(self, session: AbstractSession, record: RepositoryObject) -> None:
        """Add or refresh `record` in the index."""

    @abc.abstractmethod
    def unindex(self, session: AbstractSession, record_id: str) -> None:
        """Remove a record from the index. Unknown ids are ignored."""

    @abc.abstractmethod
    def is_indexed(self, record_id: str) -> bool:
        """Return True if `record_id` is in the committed index."""

    @abc.abstractmethod
    def commit(self) -> None:
        """Make pending index changes visible."""
