"""Initial schema: users, pricing_plans, subscriptions, qr_codes, qr_scans

Revision ID: 3c1e9a7f2b10
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Revision identifiers
revision: str = "3c1e9a7f2b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# ─────────────────────────────────────────────
# ✅ UPGRADE
# ─────────────────────────────────────────────
def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=200), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=True),
        sa.Column("plan", sa.String(length=30), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "pricing_plans",
        sa.Column("slug", sa.String(length=30), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("max_qr_codes", sa.Integer(), nullable=False),
        sa.Column("scan_limit", sa.Integer(), nullable=False),
        sa.Column("qr_duration_days", sa.Integer(), nullable=True),
        sa.Column("dynamic_qr", sa.Boolean(), nullable=True),
        sa.Column("can_use_logo", sa.Boolean(), nullable=True),
        sa.Column("can_use_frames", sa.Boolean(), nullable=True),
        sa.Column("can_use_analytics", sa.Boolean(), nullable=True),
        sa.Column("api_access", sa.Boolean(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("slug"),
    )

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("plan_slug", sa.String(length=30), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("current_period_end", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["plan_slug"], ["pricing_plans.slug"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "qr_codes",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("short_code", sa.String(length=50), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("content", sa.JSON(), nullable=True),
        sa.Column("settings", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_dynamic", sa.Boolean(), nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("scan_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_qr_codes_short_code"), "qr_codes", ["short_code"], unique=True)
    op.create_index(op.f("ix_qr_codes_user_id"), "qr_codes", ["user_id"], unique=False)

    op.create_table(
        "qr_scans",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("qr_code_id", sa.String(length=36), nullable=False),
        sa.Column("ip_address", sa.String(length=64), nullable=False),
        sa.Column("user_agent", sa.String(length=500), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=False),
        sa.Column("city", sa.String(length=100), nullable=False),
        sa.Column("device_type", sa.String(length=20), nullable=False),
        sa.Column("browser", sa.String(length=50), nullable=False),
        sa.Column("os", sa.String(length=50), nullable=False),
        sa.Column("scanned_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["qr_code_id"], ["qr_codes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        mysql_engine="InnoDB",
        mysql_charset="utf8mb4",
        mysql_collate="utf8mb4_unicode_ci",
    )
    op.create_index(op.f("ix_qr_scans_id"), "qr_scans", ["id"], unique=False)
    op.create_index(op.f("ix_qr_scans_qr_code_id"), "qr_scans", ["qr_code_id"], unique=False)
    op.create_index(op.f("ix_qr_scans_scanned_at"), "qr_scans", ["scanned_at"], unique=False)


# ─────────────────────────────────────────────
# ⬇️ DOWNGRADE
# ─────────────────────────────────────────────
def downgrade() -> None:
    op.drop_index(op.f("ix_qr_scans_scanned_at"), table_name="qr_scans")
    op.drop_index(op.f("ix_qr_scans_qr_code_id"), table_name="qr_scans")
    op.drop_index(op.f("ix_qr_scans_id"), table_name="qr_scans")
    op.drop_table("qr_scans")
    op.drop_index(op.f("ix_qr_codes_user_id"), table_name="qr_codes")
    op.drop_index(op.f("ix_qr_codes_short_code"), table_name="qr_codes")
    op.drop_table("qr_codes")
    op.drop_table("subscriptions")
    op.drop_table("pricing_plans")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
