"""initial estate schema

Revision ID: 20261017_0001
Revises:
Create Date: 2026-10-17 00:00:01
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261017_0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "partners",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "buildings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("partner_id", sa.Integer(), nullable=False),
        sa.Column("address", sa.String(length=300), nullable=False),
        sa.ForeignKeyConstraint(["partner_id"], ["partners.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_buildings_partner_id", "buildings", ["partner_id"], unique=False)

    op.create_table(
        "tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=80), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "estates",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("building_id", sa.Integer(), nullable=False),
        sa.Column("sqm", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("residents_quantity", sa.Integer(), nullable=True),
        sa.Column("balance", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("comment", sa.String(length=500), nullable=True),
        sa.Column("non_null_text", sa.String(length=255), nullable=False),
        sa.Column("number_text", sa.String(length=32), nullable=True),
        sa.Column("phone_numbers", sa.JSON(), nullable=False),
        sa.Column("owner_document", sa.LargeBinary(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["building_id"], ["buildings.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_estates_building_id", "estates", ["building_id"], unique=False)

    op.create_table(
        "estate_owner_assignments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("estate_id", sa.Integer(), nullable=False),
        sa.Column("partner_id", sa.Integer(), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(["estate_id"], ["estates.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["partner_id"], ["partners.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_estate_owner_assignments_active",
        "estate_owner_assignments",
        ["estate_id", "is_primary", "end_date", "deleted"],
        unique=False,
    )
    op.create_index(
        "ix_estate_owner_assignments_partner_id",
        "estate_owner_assignments",
        ["partner_id"],
        unique=False,
    )

    op.create_table(
        "estate_documents",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("estate_id", sa.Integer(), nullable=False),
        sa.Column("kind", sa.String(length=32), nullable=False),
        sa.Column("number_encrypted", sa.LargeBinary(), nullable=True),
        sa.ForeignKeyConstraint(["estate_id"], ["estates.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_estate_documents_estate_id", "estate_documents", ["estate_id"], unique=False)

    op.create_table(
        "estate_tags",
        sa.Column("estate_id", sa.Integer(), nullable=False),
        sa.Column("tag_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["estate_id"], ["estates.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tag_id"], ["tags.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("estate_id", "tag_id"),
    )


def downgrade() -> None:
    op.drop_table("estate_tags")
    op.drop_index("ix_estate_documents_estate_id", table_name="estate_documents")
    op.drop_table("estate_documents")
    op.drop_index("ix_estate_owner_assignments_partner_id", table_name="estate_owner_assignments")
    op.drop_index("ix_estate_owner_assignments_active", table_name="estate_owner_assignments")
    op.drop_table("estate_owner_assignments")
    op.drop_index("ix_estates_building_id", table_name="estates")
    op.drop_table("estates")
    op.drop_table("tags")
    op.drop_index("ix_buildings_partner_id", table_name="buildings")
    op.drop_table("buildings")
    op.drop_table("partners")
