"""owner backend schema

Revision ID: 0001_owner_schema
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_owner_schema"
down_revision = None
branch_labels = None
depends_on = None

RESTAURANT_STATUSES = ("inactive", "pending", "active", "rejected", "suspended")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.Enum("ADMIN", "OWNER", name="user_role"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "restaurants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("street", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("city", sa.String(length=128), nullable=False, server_default=""),
        sa.Column("state", sa.String(length=128), nullable=False, server_default="Kerala"),
        sa.Column("zip_code", sa.String(length=16), nullable=False, server_default=""),
        sa.Column("contact_number", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("email", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("image", sa.String(length=1024), nullable=False, server_default=""),
        sa.Column("fssai_license_number", sa.String(length=64), nullable=True),
        sa.Column("fssai_certificate_url", sa.String(length=1024), nullable=True),
        sa.Column("gst_number", sa.String(length=64), nullable=True),
        sa.Column("trade_license_number", sa.String(length=64), nullable=True),
        sa.Column("pan_number", sa.String(length=32), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*RESTAURANT_STATUSES, name="restaurant_status"),
            nullable=False,
            server_default="inactive",
        ),
        sa.Column("verification_notes", sa.Text(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("num_reviews", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_open", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_manual_override", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_restaurants_owner_id", "restaurants", ["owner_id"])
    op.create_index("ix_restaurants_status", "restaurants", ["status"])

    op.create_table(
        "restaurant_opening_hours",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("restaurant_id", sa.Integer(), sa.ForeignKey("restaurants.id"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("day", sa.Integer(), nullable=False),
        sa.Column("open_time", sa.String(length=5), nullable=False, server_default="09:00"),
        sa.Column("close_time", sa.String(length=5), nullable=False, server_default="22:00"),
        sa.Column("is_closed", sa.Boolean(), nullable=False, server_default=sa.text("0")),
    )
    op.create_index("ix_restaurant_opening_hours_restaurant_id", "restaurant_opening_hours", ["restaurant_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("actor_user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("actor_identifier", sa.String(length=255), nullable=False),
        sa.Column("action_type", sa.String(length=64), nullable=False),
        sa.Column("restaurant_id", sa.Integer(), nullable=True),
        sa.Column("before_snapshot", sa.JSON(), nullable=True),
        sa.Column("after_snapshot", sa.JSON(), nullable=True),
    )
    op.create_index("ix_audit_logs_restaurant_id", "audit_logs", ["restaurant_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_logs_restaurant_id", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_restaurant_opening_hours_restaurant_id", table_name="restaurant_opening_hours")
    op.drop_table("restaurant_opening_hours")
    op.drop_index("ix_restaurants_status", table_name="restaurants")
    op.drop_index("ix_restaurants_owner_id", table_name="restaurants")
    op.drop_table("restaurants")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
