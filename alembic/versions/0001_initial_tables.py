"""initial admins, bins, collections, reports tables

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:12:40.118305

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "admins",
        sa.Column("admin_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("admin_id", name=op.f("pk_admins")),
        sa.UniqueConstraint("username", name=op.f("uq_admins_username")),
    )

    op.create_table(
        "bins",
        sa.Column("bin_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="empty"),
        sa.Column("fill_level", sa.Integer(), nullable=True),
        sa.Column("status_updated_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("bin_id", name=op.f("pk_bins")),
        sa.UniqueConstraint("code", name=op.f("uq_bins_code")),
    )

    op.create_table(
        "collections",
        sa.Column("collection_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("bin_id", sa.Integer(), nullable=False),
        sa.Column("collected_by", sa.String(255), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="scheduled"),
        sa.Column("collection_date", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["bin_id"], ["bins.bin_id"], name=op.f("fk_collections_bin_id_bins")),
        sa.PrimaryKeyConstraint("collection_id", name=op.f("pk_collections")),
    )
    op.create_index("ix_collections_bin_id", "collections", ["bin_id"])
    op.create_index("ix_collections_created_at", "collections", ["created_at"])

    op.create_table(
        "reports",
        sa.Column("report_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("report_name", sa.String(255), nullable=False),
        sa.Column("report_type", sa.String(50), nullable=False),
        sa.Column("generated_by", sa.Integer(), nullable=True),
        sa.Column("date_from", sa.Date(), nullable=True),
        sa.Column("date_to", sa.Date(), nullable=True),
        sa.Column("report_data", sa.Text(), nullable=True),
        sa.Column("format", sa.String(10), nullable=False, server_default="pdf"),
        sa.Column("status", sa.String(20), nullable=False, server_default="generating"),
        sa.Column("file_path", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["generated_by"], ["admins.admin_id"], name=op.f("fk_reports_generated_by_admins")),
        sa.PrimaryKeyConstraint("report_id", name=op.f("pk_reports")),
        sa.CheckConstraint(
            "(status = 'completed') = (file_path IS NOT NULL)",
            name=op.f("ck_reports_file_path_iff_completed"),
        ),
    )
    op.create_index("ix_reports_created_at", "reports", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_reports_created_at", "reports")
    op.drop_table("reports")
    op.drop_index("ix_collections_created_at", "collections")
    op.drop_index("ix_collections_bin_id", "collections")
    op.drop_table("collections")
    op.drop_table("bins")
    op.drop_table("admins")
