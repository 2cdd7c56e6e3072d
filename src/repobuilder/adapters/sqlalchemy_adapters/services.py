"""SQLAlchemy-backed domain services for REPOBUILDER.

Each service reads and writes one repository table through the Connection of
the `SqlAlchemySession` it is handed. Referential rules are checked explicitly
before deleting so callers get a precise `ReferentialIntegrityError`; driver
integrity errors that slip through are mapped onto the domain hierarchy the
same way.

Classes:
    SqlAlchemyCommunityService, SqlAlchemyCollectionService,
    SqlAlchemyItemService, SqlAlchemyEPersonService,
    SqlAlchemyBitstreamService -- implement the service ports.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, BinaryIO

from sqlalchemy import Table, delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError

from repobuilder.adapters.db.schema import (
    bitstreams,
    collections,
    communities,
    epersons,
    items,
)
from repobuilder.adapters.id_generators import ULIDGenerator
from repobuilder.domain.errors import (
    AuthorizationError,
    BitstreamNotDeletedError,
    DuplicateEntityError,
    EntityNotFoundError,
    ReferentialIntegrityError,
)
from repobuilder.domain.model import Bitstream, Collection, Community, EPerson, Item
from repobuilder.interfaces.services import (
    BitstreamService,
    CollectionService,
    CommunityService,
    EPersonService,
    ItemService,
)

from .session import SqlAlchemySession

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

    from repobuilder.interfaces.assetstore import AssetStore
    from repobuilder.interfaces.id_generator import IdGenerator
    from repobuilder.interfaces.session import AbstractSession

logger = logging.getLogger(__name__)

# all flags must be present
UNIQUE_EMAIL_CONSTRAINT_KEYWORDS = ("email", "unique")  # pragma: no mutate


def _connection(session: AbstractSession) -> Connection:
    if not isinstance(session, SqlAlchemySession):
        raise TypeError(
            f"SQLAlchemy services need a SqlAlchemySession, got {type(session).__name__}"
        )
    return session.connection


def _integrity_message(error: IntegrityError) -> str:
    return str(error.orig) if error.orig is not None else str(error)


class _SqlAlchemyRecordService:
    """Row lookup shared by every SQLAlchemy service."""

    TABLE: Table
    RECORD: type
    KIND: str

    def __init__(self, id_generator: IdGenerator | None = None) -> None:
        self._ids = id_generator or ULIDGenerator()

    def find(self, session: AbstractSession, record_id: str):
        row = (
            _connection(session)
            .execute(select(self.TABLE).where(self.TABLE.c.id == record_id))
            .mappings()
            .one_or_none()
        )
        return self.RECORD(**row) if row is not None else None

    def _insert(self, session: AbstractSession, values: dict[str, Any]):
        row = (
            _connection(session)
            .execute(insert(self.TABLE).values(**values).returning(self.TABLE))
            .mappings()
            .one()
        )
        return self.RECORD(**row)

    def _delete_row(self, session: AbstractSession, record_id: str) -> None:
        try:
            _connection(session).execute(
                delete(self.TABLE).where(self.TABLE.c.id == record_id)
            )
        except IntegrityError as e:
            raise ReferentialIntegrityError(
                self.KIND, record_id, f"dependents ({_integrity_message(e)})"
            ) from e

    @staticmethod
    def _count(session: AbstractSession, table: Table, *criteria) -> int:
        stmt = select(func.count()).select_from(table).where(*criteria)
        return int(_connection(session).execute(stmt).scalar_one())

    @staticmethod
    def _require(
        session: AbstractSession, table: Table, kind: str, record_id: str
    ) -> None:
        stmt = select(table.c.id).where(table.c.id == record_id)
        if _connection(session).execute(stmt).first() is None:
            raise EntityNotFoundError(kind, record_id)


class SqlAlchemyCommunityService(_SqlAlchemyRecordService, CommunityService):
    """Communities stored in the `communities` table."""

    TABLE = communities
    RECORD = Community

    def create(
        self, session: AbstractSession, name: str, parent: Community | None = None
    ) -> Community:
        if parent is not None:
            self._require(session, communities, "Community", parent.id)
        return self._insert(
            session,
            {
                "id": self._ids.new_id(),
                "name": name,
                "parent_id": parent.id if parent is not None else None,
            },
        )

    def delete(self, session: AbstractSession, record: Community) -> None:
        if self._count(session, communities, communities.c.parent_id == record.id):
            raise ReferentialIntegrityError(self.KIND, record.id, "sub-communities")
        if self._count(session, collections, collections.c.community_id == record.id):
            raise ReferentialIntegrityError(self.KIND, record.id, "collections")
        self._delete_row(session, record.id)


class SqlAlchemyCollectionService(_SqlAlchemyRecordService, CollectionService):
    """Collections stored in the `collections` table."""

    TABLE = collections
    RECORD = Collection

    def create(
        self, session: AbstractSession, name: str, community: Community
    ) -> Collection:
        self._require(session, communities, "Community", community.id)
        return self._insert(
            session,
            {"id": self._ids.new_id(), "name": name, "community_id": community.id},
        )

    def delete(self, session: AbstractSession, record: Collection) -> None:
        if self._count(session, items, items.c.collection_id == record.id):
            raise ReferentialIntegrityError(self.KIND, record.id, "items")
        self._delete_row(session, record.id)


class SqlAlchemyItemService(_SqlAlchemyRecordService, ItemService):
    """Items stored in the `items` table."""

    TABLE = items
    RECORD = Item

    def create(
        self,
        session: AbstractSession,
        title: str,
        collection: Collection,
        submitter: EPerson | None = None,
    ) -> Item:
        self._require(session, collections, "Collection", collection.id)
        if submitter is not None:
            self._require(session, epersons, "EPerson", submitter.id)
        return self._insert(
            session,
            {
                "id": self._ids.new_id(),
                "title": title,
                "collection_id": collection.id,
                "submitter_id": submitter.id if submitter is not None else None,
            },
        )

    def delete(self, session: AbstractSession, record: Item) -> None:
        # Removing an item soft-deletes and detaches its bitstreams.
        _connection(session).execute(
            update(bitstreams)
            .where(bitstreams.c.item_id == record.id)
            .values(item_id=None, deleted=True)
        )
        self._delete_row(session, record.id)


class SqlAlchemyEPersonService(_SqlAlchemyRecordService, EPersonService):
    """Accounts stored in the `epersons` table."""

    TABLE = epersons
    RECORD = EPerson

    def create(  # pylint: disable=too-many-arguments
        self,
        session: AbstractSession,
        email: str,
        *,
        first_name: str = "",
        last_name: str = "",
        can_log_in: bool = True,
    ) -> EPerson:
        try:
            return self._insert(
                session,
                {
                    "id": self._ids.new_id(),
                    "email": email.lower(),
                    "first_name": first_name,
                    "last_name": last_name,
                    "can_log_in": can_log_in,
                },
            )
        except IntegrityError as e:
            msg = _integrity_message(e).lower()
            if all(kw in msg for kw in UNIQUE_EMAIL_CONSTRAINT_KEYWORDS):
                raise DuplicateEntityError(self.KIND, "email", email) from e
            raise

    def find_by_email(self, session: AbstractSession, email: str) -> EPerson | None:
        row = (
            _connection(session)
            .execute(select(epersons).where(epersons.c.email == email.lower()))
            .mappings()
            .one_or_none()
        )
        return EPerson(**row) if row is not None else None

    def delete(self, session: AbstractSession, record: EPerson) -> None:
        if self._count(session, items, items.c.submitter_id == record.id):
            raise ReferentialIntegrityError(self.KIND, record.id, "submitted items")
        self._delete_row(session, record.id)


class SqlAlchemyBitstreamService(_SqlAlchemyRecordService, BitstreamService):
    """Bitstream records in the `bitstreams` table, bytes in an asset store."""

    TABLE = bitstreams
    RECORD = Bitstream

    def __init__(
        self, assetstore: AssetStore, id_generator: IdGenerator | None = None
    ) -> None:
        super().__init__(id_generator)
        self.assetstore = assetstore

    def create(  # pylint: disable=too-many-arguments
        self,
        session: AbstractSession,
        fileobj: BinaryIO,
        *,
        name: str,
        mime_type: str = "application/octet-stream",
        item: Item | None = None,
    ) -> Bitstream:
        if item is not None:
            self._require(session, items, "Item", item.id)
        blob = self.assetstore.put_stream(fileobj)
        return self._insert(
            session,
            {
                "id": self._ids.new_id(),
                "name": name,
                "digest": blob.digest,
                "size_bytes": blob.size_bytes,
                "mime_type": mime_type,
                "item_id": item.id if item is not None else None,
                "deleted": False,
            },
        )

    def find_all(self, session: AbstractSession) -> Sequence[Bitstream]:
        rows = (
            _connection(session)
            .execute(select(bitstreams).order_by(bitstreams.c.id.asc()))
            .mappings()
            .all()
        )
        return [Bitstream(**row) for row in rows]

    def delete(self, session: AbstractSession, record: Bitstream) -> None:
        _connection(session).execute(
            update(bitstreams)
            .where(bitstreams.c.id == record.id)
            .where(bitstreams.c.deleted.is_(False))
            .values(deleted=True)
        )

    def expunge(self, session: AbstractSession, bitstream: Bitstream) -> None:
        if not session.ignores_authorization:
            raise AuthorizationError(f"expunge bitstream {bitstream.id}")
        if (current := self.find(session, bitstream.id)) is None:
            return
        if not current.deleted:
            raise BitstreamNotDeletedError(bitstream.id)

        self._delete_row(session, current.id)
        session.after_commit(lambda: self._remove_unreferenced(session, current.digest))

    def _remove_unreferenced(self, session: AbstractSession, digest: str) -> None:
        if self._count(session, bitstreams, bitstreams.c.digest == digest):
            return
        self.assetstore.remove(digest)
        logger.debug("Removed blob %s", digest)
