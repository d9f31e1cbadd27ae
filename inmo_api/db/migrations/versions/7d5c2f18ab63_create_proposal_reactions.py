"""Create proposal reactions table

Revision ID: 7d5c2f18ab63
Revises: 3a91e0c7d2b4
Create Date: 2025-11-19 16:42:07.553104

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7d5c2f18ab63"
down_revision: str | None = "3a91e0c7d2b4"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "propuesta_reacciones",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("propuesta_id", sa.String(length=36), nullable=False),
        sa.Column("propiedad_id", sa.String(length=36), nullable=False),
        sa.Column("tipo_reaccion", sa.String(length=20), nullable=False),
        sa.Column("comentario", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["propuesta_id"], ["propuestas.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["propiedad_id"], ["propiedades.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_propuesta_reacciones_propuesta_id",
        "propuesta_reacciones",
        ["propuesta_id"],
    )
    op.create_index(
        "ix_propuesta_reacciones_propiedad_id",
        "propuesta_reacciones",
        ["propiedad_id"],
    )
    op.create_index(
        "propuesta_reacciones_unique_reaction",
        "propuesta_reacciones",
        ["propuesta_id", "propiedad_id", "tipo_reaccion"],
        unique=True,
        postgresql_where=sa.text("tipo_reaccion <> 'comment'"),
        sqlite_where=sa.text("tipo_reaccion <> 'comment'"),
    )


def downgrade() -> None:
    op.drop_index(
        "propuesta_reacciones_unique_reaction", table_name="propuesta_reacciones"
    )
    op.drop_index(
        "ix_propuesta_reacciones_propiedad_id", table_name="propuesta_reacciones"
    )
    op.drop_index(
        "ix_propuesta_reacciones_propuesta_id", table_name="propuesta_reacciones"
    )
    op.drop_table("propuesta_reacciones")
