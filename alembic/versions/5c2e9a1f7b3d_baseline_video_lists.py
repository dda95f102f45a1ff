"""Baseline schema for video lists, invitations and verification

Revision ID: 5c2e9a1f7b3d
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c2e9a1f7b3d"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("email", sa.String(255), nullable=True, unique=True, index=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("email_verification_time", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "usernames",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("username", sa.String(30), nullable=False, unique=True, index=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id"),
            nullable=False,
            unique=True,
            index=True,
        ),
        *_timestamps(),
    )

    op.create_table(
        "lists",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("share_token", sa.String(64), nullable=True, unique=True, index=True),
        # NULL means "use the default matrix"
        sa.Column("permissions", sa.JSON(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "list_items",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("list_id", sa.Integer(), sa.ForeignKey("lists.id"), nullable=False, index=True),
        sa.Column(
            "added_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True
        ),
        sa.Column("video_url", sa.String(2048), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("thumbnail_url", sa.String(2048), nullable=True),
        sa.Column("duration", sa.String(50), nullable=True),
        sa.Column("author_name", sa.String(255), nullable=True),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("view_count", sa.BigInteger(), nullable=True),
        sa.Column("like_count", sa.BigInteger(), nullable=True),
        sa.Column("published_at", sa.String(50), nullable=True),
        sa.Column("platform", sa.String(20), nullable=False, server_default="other"),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("ratings", sa.JSON(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "list_invitations",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("list_id", sa.Integer(), sa.ForeignKey("lists.id"), nullable=False, index=True),
        sa.Column("invited_email", sa.String(255), nullable=False, index=True),
        sa.Column("invited_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        *_timestamps(),
        sa.UniqueConstraint("list_id", "invited_email", name="uq_list_invitations_list_email"),
    )

    op.create_table(
        "user_watched_items",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column(
            "item_id", sa.Integer(), sa.ForeignKey("list_items.id"), nullable=False, index=True
        ),
        sa.Column("watched", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "item_id", name="uq_user_watched_items"),
    )

    op.create_table(
        "email_verifications",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("token", sa.String(128), nullable=False, unique=True, index=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )


def downgrade() -> None:
    # Children before parents
    op.drop_table("email_verifications")
    op.drop_table("user_watched_items")
    op.drop_table("list_invitations")
    op.drop_table("list_items")
    op.drop_table("lists")
    op.drop_table("usernames")
    op.drop_table("users")
