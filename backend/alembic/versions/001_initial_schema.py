"""Initial schema — users, lists, todos, list_items.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(64), nullable=False, unique=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("is_activated", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("activation_token", sa.String(128), nullable=True),
        sa.Column("activation_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reset_token", sa.String(64), nullable=True),
        sa.Column("reset_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("role", sa.String(10), nullable=False, server_default="user"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_activation_token", "users", ["activation_token"])
    op.create_index("ix_users_reset_token", "users", ["reset_token"])

    op.create_table(
        "lists",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False, unique=True),
        sa.Column(
            "owner_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "todos",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("done", sa.Boolean, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "list_items",
        sa.Column(
            "list_id", UUID(as_uuid=True),
            sa.ForeignKey("lists.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column(
            "todo_id", UUID(as_uuid=True),
            sa.ForeignKey("todos.id", ondelete="CASCADE"), primary_key=True,
            unique=True,
        ),
    )


def downgrade() -> None:
    op.drop_table("list_items")
    op.drop_table("todos")
    op.drop_table("lists")
    op.drop_index("ix_users_reset_token", table_name="users")
    op.drop_index("ix_users_activation_token", table_name="users")
    op.drop_table("users")
