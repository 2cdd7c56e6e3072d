"""In-memory implementations of the domain service ports."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, BinaryIO

from repobuilder.adapters.id_generators import ULIDGenerator
from repobuilder.domain.errors import (
    AuthorizationError,
    BitstreamNotDeletedError,
    DuplicateEntityError,
    EntityNotFoundError,
    ReferentialIntegrityError,
)
from repobuilder.domain.model import (
    Bitstream,
    Collection,
    Community,
    EPerson,
    Item,
    RepositoryObject,
)
from repobuilder.interfaces.services import (
    BitstreamService,
    CollectionService,
    CommunityService,
    EPersonService,
    IndexingService,
    ItemService,
)

from .session import InMemorySession

if TYPE_CHECKING:
    from repobuilder.interfaces.id_generator import IdGenerator
    from repobuilder.interfaces.session import AbstractSession

logger = logging.getLogger(__name__)


def _memory_session(session: AbstractSession) -> InMemorySession:
    if not isinstance(session, InMemorySession):
        raise TypeError(
            f"in-memory services need an InMemorySession, got {type(session).__name__}"
        )
    return session


class _InMemoryRecordService:
    """Lookup and removal over one table of an InMemorySession."""

    TABLE: str
    KIND: str

    def __init__(self, id_generator: IdGenerator | None = None) -> None:
        self._ids = id_generator or ULIDGenerator()

    def find(self, session: AbstractSession, record_id: str):
        return _memory_session(session).get(self.TABLE, record_id)

    def _require(self, session: AbstractSession, table: str, kind: str, record_id: str):
        if (record := _memory_session(session).get(table, record_id)) is None:
            raise EntityNotFoundError(kind, record_id)
        return record


class InMemoryCommunityService(_InMemoryRecordService, CommunityService):
    """Communities stored in the `communities` table."""

    TABLE = "communities"

    def create(
        self, session: AbstractSession, name: str, parent: Community | None = None
    ) -> Community:
        mem = _memory_session(session)
        if parent is not None:
            self._require(session, "communities", "Community", parent.id)
        community = Community(
            id=self._ids.new_id(),
            name=name,
            parent_id=parent.id if parent is not None else None,
        )
        return mem.put(self.TABLE, community)

    def delete(self, session: AbstractSession, record: Community) -> None:
        mem = _memory_session(session)
        if mem.get(self.TABLE, record.id) is None:
            return
        if any(c.parent_id == record.id for c in mem.rows("communities").values()):
            raise ReferentialIntegrityError(self.KIND, record.id, "sub-communities")
        if any(c.community_id == record.id for c in mem.rows("collections").values()):
            raise ReferentialIntegrityError(self.KIND, record.id, "collections")
        mem.discard(self.TABLE, record.id)


class InMemoryCollectionService(_InMemoryRecordService, CollectionService):
    """Collections stored in the `collections` table."""

    TABLE = "collections"

    def create(
        self, session: AbstractSession, name: str, community: Community
    ) -> Collection:
        self._require(session, "communities", "Community", community.id)
        collection = Collection(
            id=self._ids.new_id(), name=name, community_id=community.id
        )
        return _memory_session(session).put(self.TABLE, collection)

    def delete(self, session: AbstractSession, record: Collection) -> None:
        mem = _memory_session(session)
        if mem.get(self.TABLE, record.id) is None:
            return
        if any(i.collection_id == record.id for i in mem.rows("items").values()):
            raise ReferentialIntegrityError(self.KIND, record.id, "items")
        mem.discard(self.TABLE, record.id)


class InMemoryItemService(_InMemoryRecordService, ItemService):
    """Items stored in the `items` table."""

    TABLE = "items"

    def create(
        self,
        session: AbstractSession,
        title: str,
        collection: Collection,
        submitter: EPerson | None = None,
    ) -> Item:
        self._require(session, "collections", "Collection", collection.id)
        if submitter is not None:
            self._require(session, "epersons", "EPerson", submitter.id)
        item = Item(
            id=self._ids.new_id(),
            title=title,
            collection_id=collection.id,
            submitter_id=submitter.id if submitter is not None else None,
        )
        return _memory_session(session).put(self.TABLE, item)

    def delete(self, session: AbstractSession, record: Item) -> None:
        mem = _memory_session(session)
        if mem.get(self.TABLE, record.id) is None:
            return
        # Removing an item soft-deletes and detaches its bitstreams.
        for bitstream in list(mem.rows("bitstreams").values()):
            if bitstream.item_id == record.id:
                mem.put(
                    "bitstreams",
                    dataclasses.replace(bitstream, item_id=None, deleted=True),
                )
        mem.discard(self.TABLE, record.id)


class InMemoryEPersonService(_InMemoryRecordService, EPersonService):
    """Accounts stored in the `epersons` table."""

    TABLE = "epersons"

    def create(  # pylint: disable=too-many-arguments
        self,
        session: AbstractSession,
        email: str,
        *,
        first_name: str = "",
        last_name: str = "",
        can_log_in: bool = True,
    ) -> EPerson:
        if self.find_by_email(session, email) is not None:
            raise DuplicateEntityError(self.KIND, "email", email)
        eperson = EPerson(
            id=self._ids.new_id(),
            email=email.lower(),
            first_name=first_name,
            last_name=last_name,
            can_log_in=can_log_in,
        )
        return _memory_session(session).put(self.TABLE, eperson)

    def find_by_email(self, session: AbstractSession, email: str) -> EPerson | None:
        wanted = email.lower()
        for eperson in _memory_session(session).rows(self.TABLE).values():
            if eperson.email == wanted:
                return eperson
        return None

    def delete(self, session: AbstractSession, record: EPerson) -> None:
        mem = _memory_session(session)
        if mem.get(self.TABLE, record.id) is None:
            return
        if any(i.submitter_id == record.id for i in mem.rows("items").values()):
            raise ReferentialIntegrityError(self.KIND, record.id, "submitted items")
        mem.discard(self.TABLE, record.id)


class InMemoryBitstreamService(_InMemoryRecordService, BitstreamService):
    """Bitstream records in the `bitstreams` table, bytes in the data's asset store."""

    TABLE = "bitstreams"

    def create(  # pylint: disable=too-many-arguments
        self,
        session: AbstractSession,
        fileobj: BinaryIO,
        *,
        name: str,
        mime_type: str = "application/octet-stream",
        item: Item | None = None,
    ) -> Bitstream:
        mem = _memory_session(session)
        if item is not None:
            self._require(session, "items", "Item", item.id)
        blob = mem.data.assetstore.put_stream(fileobj)
        bitstream = Bitstream(
            id=self._ids.new_id(),
            name=name,
            digest=blob.digest,
            size_bytes=blob.size_bytes,
            mime_type=mime_type,
            item_id=item.id if item is not None else None,
        )
        return mem.put(self.TABLE, bitstream)

    def find_all(self, session: AbstractSession) -> Sequence[Bitstream]:
        return list(_memory_session(session).rows(self.TABLE).values())

    def delete(self, session: AbstractSession, record: Bitstream) -> None:
        mem = _memory_session(session)
        current = mem.get(self.TABLE, record.id)
        if current is None or current.deleted:
            return
        mem.put(self.TABLE, dataclasses.replace(current, deleted=True))

    def expunge(self, session: AbstractSession, bitstream: Bitstream) -> None:
        mem = _memory_session(session)
        if not session.ignores_authorization:
            raise AuthorizationError(f"expunge bitstream {bitstream.id}")
        current = mem.get(self.TABLE, bitstream.id)
        if current is None:
            return
        if not current.deleted:
            raise BitstreamNotDeletedError(bitstream.id)
        mem.discard(self.TABLE, bitstream.id)
        session.after_commit(lambda: self._remove_unreferenced(mem, current.digest))

    def _remove_unreferenced(self, mem: InMemorySession, digest: str) -> None:
        if any(b.digest == digest for b in mem.rows(self.TABLE).values()):
            return
        mem.data.assetstore.remove(digest)
        logger.debug("Removed blob %s", digest)


class InMemoryIndexingService(IndexingService):
    """Search index kept as a set of record ids.

    Changes are staged until `commit()`, mirroring a search engine's
    soft-commit.
    """

    def __init__(self) -> None:
        self._committed: dict[str, str] = {}
        self._pending: dict[str, str | None] = {}

    def index(self, session: AbstractSession, record: RepositoryObject) -> None:
        self._pending[record.id] = type(record).__name__

    def unindex(self, session: AbstractSession, record_id: str) -> None:
        self._pending[record_id] = None

    def is_indexed(self, record_id: str) -> bool:
        return record_id in self._committed

    def commit(self) -> None:
        for record_id, kind in self._pending.items():
            if kind is None:
                self._committed.pop(record_id, None)
            else:
                self._committed[record_id] = kind
        self._pending.clear()
