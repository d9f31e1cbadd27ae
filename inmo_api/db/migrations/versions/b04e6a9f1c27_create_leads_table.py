"""Create leads table

Revision ID: b04e6a9f1c27
Revises: 7d5c2f18ab63
Create Date: 2025-11-26 09:15:33.904417

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "b04e6a9f1c27"
down_revision: str | None = "7d5c2f18ab63"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "leads",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("tenant_id", sa.String(length=36), nullable=False),
        sa.Column("propiedad_id", sa.String(length=36), nullable=True),
        sa.Column("property_title", sa.String(length=500), nullable=True),
        sa.Column("asignado", sa.String(length=36), nullable=True),
        sa.Column("cliente_nombre", sa.String(length=255), nullable=False),
        sa.Column("cliente_telefono", sa.String(length=50), nullable=True),
        sa.Column("cliente_celular", sa.String(length=50), nullable=True),
        sa.Column("cliente_email", sa.String(length=255), nullable=False),
        sa.Column("mensaje", sa.Text(), nullable=True),
        sa.Column(
            "acepta_terminos",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column(
            "origen",
            sa.String(length=100),
            nullable=False,
            server_default="web_formulario",
        ),
        sa.Column("referidor_lead", sa.String(length=500), nullable=True),
        sa.Column("utm_source", sa.String(length=255), nullable=True),
        sa.Column("utm_medium", sa.String(length=255), nullable=True),
        sa.Column("utm_campaign", sa.String(length=255), nullable=True),
        sa.Column("ip_origen", sa.String(length=45), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column(
            "language", sa.String(length=10), nullable=False, server_default="es"
        ),
        sa.Column("estado", sa.String(length=50), nullable=False, server_default="new"),
        sa.Column("fecha_contacto", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notas", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["propiedad_id"], ["propiedades.id"], ondelete="SET NULL"
        ),
        sa.ForeignKeyConstraint(["asignado"], ["usuarios.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_leads_tenant_id", "leads", ["tenant_id"])
    op.create_index("ix_leads_propiedad_id", "leads", ["propiedad_id"])
    op.create_index("ix_leads_asignado", "leads", ["asignado"])
    op.create_index("ix_leads_cliente_email", "leads", ["cliente_email"])
    op.create_index("idx_leads_estado", "leads", ["tenant_id", "estado"])
    op.create_index("idx_leads_created", "leads", ["tenant_id", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_leads_created", table_name="leads")
    op.drop_index("idx_leads_estado", table_name="leads")
    op.drop_index("ix_leads_cliente_email", table_name="leads")
    op.drop_index("ix_leads_asignado", table_name="leads")
    op.drop_index("ix_leads_propiedad_id", table_name="leads")
    op.drop_index("ix_leads_tenant_id", table_name="leads")
    op.drop_table("leads")
