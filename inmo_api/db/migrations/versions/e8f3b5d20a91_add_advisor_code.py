"""Add public referral code to advisor profiles

Revision ID: e8f3b5d20a91
Revises: b04e6a9f1c27
Create Date: 2025-12-03 11:27:48.061592

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "e8f3b5d20a91"
down_revision: str | None = "b04e6a9f1c27"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.add_column(
        "perfiles_asesor",
        sa.Column("codigo", sa.String(length=20), nullable=True),
    )
    op.create_unique_constraint(
        "perfiles_asesor_codigo_key", "perfiles_asesor", ["codigo"]
    )


def downgrade() -> None:
    op.drop_constraint(
        "perfiles_asesor_codigo_key", "perfiles_asesor", type_="unique"
    )
    op.drop_column("perfiles_asesor", "codigo")
