"""Create device favorites tables

Revision ID: 3a91e0c7d2b4
Revises:
Create Date: 2025-11-12 10:04:51.218930

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3a91e0c7d2b4"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "device_favorites",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("device_id", sa.String(length=255), nullable=False),
        sa.Column("public_code", sa.String(length=32), nullable=True),
        sa.Column("owner_name", sa.String(length=255), nullable=True),
        sa.Column("owner_email", sa.String(length=255), nullable=True),
        sa.Column("property_ids", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_device_favorites_device_id", "device_favorites", ["device_id"], unique=True
    )
    op.create_index(
        "ix_device_favorites_public_code",
        "device_favorites",
        ["public_code"],
        unique=True,
    )
    op.create_index(
        "ix_device_favorites_owner_email", "device_favorites", ["owner_email"]
    )
    op.create_index(
        "ix_device_favorites_updated_at", "device_favorites", ["updated_at"]
    )

    op.create_table(
        "favorite_visitors",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("list_id", sa.String(length=255), nullable=False),
        sa.Column("visitor_device_id", sa.String(length=255), nullable=False),
        sa.Column("visitor_alias", sa.String(length=255), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_seen", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "list_id", "visitor_device_id", name="unique_visitor_per_list"
        ),
    )
    op.create_index("ix_favorite_visitors_list_id", "favorite_visitors", ["list_id"])
    op.create_index(
        "ix_favorite_visitors_visitor_device_id",
        "favorite_visitors",
        ["visitor_device_id"],
    )

    op.create_table(
        "favorite_reactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("list_id", sa.String(length=255), nullable=False),
        sa.Column("property_id", sa.String(length=255), nullable=False),
        sa.Column("visitor_device_id", sa.String(length=255), nullable=False),
        sa.Column("visitor_alias", sa.String(length=255), nullable=False),
        sa.Column("reaction_type", sa.String(length=16), nullable=False),
        sa.Column("comment_text", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "reaction_type IN ('like', 'dislike', 'comment')",
            name="ck_favorite_reactions_type",
        ),
    )
    op.create_index("ix_favorite_reactions_list_id", "favorite_reactions", ["list_id"])
    op.create_index(
        "ix_favorite_reactions_property_id", "favorite_reactions", ["property_id"]
    )
    op.create_index(
        "ix_favorite_reactions_visitor_device_id",
        "favorite_reactions",
        ["visitor_device_id"],
    )
    op.create_index(
        "ix_favorite_reactions_reaction_type", "favorite_reactions", ["reaction_type"]
    )
    # Comments repeat; likes and dislikes are one per visitor and property.
    op.create_index(
        "unique_like_dislike_per_visitor",
        "favorite_reactions",
        ["list_id", "property_id", "visitor_device_id", "reaction_type"],
        unique=True,
        postgresql_where=sa.text("reaction_type <> 'comment'"),
        sqlite_where=sa.text("reaction_type <> 'comment'"),
    )


def downgrade() -> None:
    op.drop_index("unique_like_dislike_per_visitor", table_name="favorite_reactions")
    op.drop_index(
        "ix_favorite_reactions_reaction_type", table_name="favorite_reactions"
    )
    op.drop_index(
        "ix_favorite_reactions_visitor_device_id", table_name="favorite_reactions"
    )
    op.drop_index("ix_favorite_reactions_property_id", table_name="favorite_reactions")
    op.drop_index("ix_favorite_reactions_list_id", table_name="favorite_reactions")
    op.drop_table("favorite_reactions")

    op.drop_index(
        "ix_favorite_visitors_visitor_device_id", table_name="favorite_visitors"
    )
    op.drop_index("ix_favorite_visitors_list_id", table_name="favorite_visitors")
    op.drop_table("favorite_visitors")

    op.drop_index("ix_device_favorites_updated_at", table_name="device_favorites")
    op.drop_index("ix_device_favorites_owner_email", table_name="device_favorites")
    op.drop_index("ix_device_favorites_public_code", table_name="device_favorites")
    op.drop_index("ix_device_favorites_device_id", table_name="device_favorites")
    op.drop_table("device_favorites")
