"""Initial schema — users and connection_requests.

Revision ID: 001_initial
Revises:
Create Date: 2025-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── 1. users ────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("first_name", sa.String(20), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=True),
        sa.Column(
            "gender",
            sa.String(10),
            nullable=True,
            comment="female / male / others",
        ),
        sa.Column("email_id", sa.String, nullable=False),
        sa.Column(
            "password",
            sa.String,
            nullable=False,
            comment="bcrypt hash, never plaintext",
        ),
        sa.Column("age", sa.Integer, nullable=True),
        sa.Column(
            "about",
            sa.Text,
            server_default="Tell about yourself",
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_email_id", "users", ["email_id"], unique=True)
    op.create_index("ix_users_created_at", "users", ["created_at"])

    # ── 2. connection_requests ──────────────────────────────────────
    op.create_table(
        "connection_requests",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "from_user_id",
            sa.Uuid,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "to_user_id",
            sa.Uuid,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.String(10),
            nullable=False,
            comment="interested / ignored / accepted / rejected",
        ),
        sa.Column(
            "pair_key",
            sa.String(73),
            nullable=False,
            comment="min(from,to):max(from,to)",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("pair_key", name="uq_connection_request_pair"),
        sa.CheckConstraint(
            "from_user_id <> to_user_id", name="ck_connection_request_not_self"
        ),
        sa.CheckConstraint(
            "status IN ('interested', 'ignored', 'accepted', 'rejected')",
            name="ck_connection_request_status",
        ),
    )
    op.create_index(
        "ix_connection_requests_from_user_id",
        "connection_requests",
        ["from_user_id"],
    )
    op.create_index(
        "ix_connection_requests_to_status",
        "connection_requests",
        ["to_user_id", "status"],
    )


def downgrade() -> None:
    # Drop in reverse order (dependents first).
    op.drop_index(
        "ix_connection_requests_to_status", table_name="connection_requests"
    )
    op.drop_index(
        "ix_connection_requests_from_user_id", table_name="connection_requests"
    )
    op.drop_table("connection_requests")

    op.drop_index("ix_users_created_at", table_name="users")
    op.drop_index("ix_users_email_id", table_name="users")
    op.drop_table("users")
