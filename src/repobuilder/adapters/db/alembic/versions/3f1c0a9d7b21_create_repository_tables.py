"""create repository tables

Revision ID: 3f1c0a9d7b21
Revises:
Create Date: 2026-10-19 09:14:27.481305

"""

# pylint: disable=invalid-name

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# deal with alembic stuff
# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "3f1c0a9d7b21"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "communities",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "parent_id",
            sa.String(length=26),
            nullable=True,
            comment="Parent community; NULL for top-level communities.",
        ),
        sa.ForeignKeyConstraint(
            ["parent_id"],
            ["communities.id"],
            name=op.f("fk_communities_parent_id_communities"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_communities")),
        comment="Communities (optionally nested).",
    )
    op.create_index(
        op.f("ix_communities_parent_id"), "communities", ["parent_id"], unique=False
    )

    op.create_table(
        "collections",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("community_id", sa.String(length=26), nullable=False),
        sa.ForeignKeyConstraint(
            ["community_id"],
            ["communities.id"],
            name=op.f("fk_collections_community_id_communities"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_collections")),
        comment="Collections, each owned by one community.",
    )
    op.create_index(
        op.f("ix_collections_community_id"),
        "collections",
        ["community_id"],
        unique=False,
    )

    op.create_table(
        "epersons",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column(
            "email",
            sa.String(length=320),
            nullable=False,
            comment="Lower-cased e-mail address.",
        ),
        sa.Column(
            "first_name", sa.String(length=128), nullable=False, server_default=""
        ),
        sa.Column(
            "last_name", sa.String(length=128), nullable=False, server_default=""
        ),
        sa.Column(
            "can_log_in", sa.Boolean(), nullable=False, server_default=sa.true()
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_epersons")),
        sa.UniqueConstraint("email", name=op.f("uq_epersons_email")),
        comment="User accounts.",
    )

    op.create_table(
        "items",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("title", sa.String(length=512), nullable=False),
        sa.Column("collection_id", sa.String(length=26), nullable=False),
        sa.Column("submitter_id", sa.String(length=26), nullable=True),
        sa.ForeignKeyConstraint(
            ["collection_id"],
            ["collections.id"],
            name=op.f("fk_items_collection_id_collections"),
        ),
        sa.ForeignKeyConstraint(
            ["submitter_id"],
            ["epersons.id"],
            name=op.f("fk_items_submitter_id_epersons"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_items")),
        comment="Archived items.",
    )
    op.create_index(
        op.f("ix_items_collection_id"), "items", ["collection_id"], unique=False
    )
    op.create_index(
        op.f("ix_items_submitter_id"), "items", ["submitter_id"], unique=False
    )

    op.create_table(
        "bitstreams",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "digest",
            sa.String(length=64),
            nullable=False,
            comment="SHA-256 hex digest; key of the bytes in the asset store.",
        ),
        sa.Column("size_bytes", sa.BigInteger(), nullable=False),
        sa.Column("mime_type", sa.String(length=128), nullable=False),
        sa.Column("item_id", sa.String(length=26), nullable=True),
        sa.Column(
            "deleted",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
            comment="Soft-delete flag; the bytes remain until the record is expunged.",
        ),
        sa.CheckConstraint(
            "size_bytes >= 0", name=op.f("ck_bitstreams_non_negative_size")
        ),
        sa.ForeignKeyConstraint(
            ["item_id"],
            ["items.id"],
            name=op.f("fk_bitstreams_item_id_items"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_bitstreams")),
        comment="Stored binary objects.",
    )
    op.create_index(
        op.f("ix_bitstreams_digest"), "bitstreams", ["digest"], unique=False
    )
    op.create_index(
        op.f("ix_bitstreams_item_id"), "bitstreams", ["item_id"], unique=False
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index(op.f("ix_bitstreams_item_id"), table_name="bitstreams")
    op.drop_index(op.f("ix_bitstreams_digest"), table_name="bitstreams")
    op.drop_table("bitstreams")
    op.drop_index(op.f("ix_items_submitter_id"), table_name="items")
    op.drop_index(op.f("ix_items_collection_id"), table_name="items")
    op.drop_table("items")
    op.drop_table("epersons")
    op.drop_index(op.f("ix_collections_community_id"), table_name="collections")
    op.drop_table("collections")
    op.drop_index(op.f("ix_communities_parent_id"), table_name="communities")
    op.drop_table("communities")
