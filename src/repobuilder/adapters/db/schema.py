"""Repository schema.

Defines the record tables backing the SQLAlchemy persistence backend. Every
table is keyed by a 26-character ULID.

Constraints (enforced here):

| Constraint                                   | Purpose                              |
|----------------------------------------------|--------------------------------------|
| FK communities.parent_id -> communities.id   | nesting                              |
| FK collections.community_id -> communities.id| ownership                            |
| FK items.collection_id -> collections.id     | ownership                            |
| FK items.submitter_id -> epersons.id         | submitter                            |
| FK bitstreams.item_id -> items.id            | attachment (nulled on item removal)  |
| UNIQUE(epersons.email)                       | one account per address              |
| CHECK(bitstreams.size_bytes >= 0)            | sane sizes                           |

Foreign keys have no ON DELETE actions: the services check dependents
explicitly and raise `ReferentialIntegrityError`, and the database rejects
anything that slips through.
"""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    String,
    Table,
    false,
    true,
)

from repobuilder.adapters.db.metadata import metadata
from repobuilder.interfaces.id_generator import ID_LENGTH

__all__ = ["bitstreams", "collections", "communities", "epersons", "items"]


communities = Table(
    "communities",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("name", String(255), nullable=False),
    Column(
        "parent_id",
        String(ID_LENGTH),
        ForeignKey("communities.id"),
        nullable=True,
        comment="Parent community; NULL for top-level communities.",
    ),
    Index(None, "parent_id"),
    comment="Communities (optionally nested).",
)

collections = Table(
    "collections",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("name", String(255), nullable=False),
    Column(
        "community_id",
        String(ID_LENGTH),
        ForeignKey("communities.id"),
        nullable=False,
    ),
    Index(None, "community_id"),
    comment="Collections, each owned by one community.",
)

epersons = Table(
    "epersons",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column(
        "email",
        String(320),
        nullable=False,
        unique=True,
        comment="Lower-cased e-mail address.",
    ),
    Column("first_name", String(128), nullable=False, server_default=""),
    Column("last_name", String(128), nullable=False, server_default=""),
    Column("can_log_in", Boolean, nullable=False, server_default=true()),
    comment="User accounts.",
)

items = Table(
    "items",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("title", String(512), nullable=False),
    Column(
        "collection_id",
        String(ID_LENGTH),
        ForeignKey("collections.id"),
        nullable=False,
    ),
    Column(
        "submitter_id",
        String(ID_LENGTH),
        ForeignKey("epersons.id"),
        nullable=True,
    ),
    Index(None, "collection_id"),
    Index(None, "submitter_id"),
    comment="Archived items.",
)

bitstreams = Table(
    "bitstreams",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("name", String(255), nullable=False),
    Column(
        "digest",
        String(64),
        nullable=False,
        comment="SHA-256 hex digest; key of the bytes in the asset store.",
    ),
    Column("size_bytes", BigInteger, nullable=False),
    Column("mime_type", String(128), nullable=False),
    Column(
        "item_id",
        String(ID_LENGTH),
        ForeignKey("items.id"),
        nullable=True,
    ),
    Column(
        "deleted",
        Boolean,
        nullable=False,
        server_default=false(),
        comment="Soft-delete flag; the bytes remain until the record is expunged.",
    ),
    CheckConstraint("size_bytes >= 0", name="non_negative_size"),
    Index(None, "digest"),
    Index(None, "item_id"),
    comment="Stored binary objects.",
)
