"""Initial tables: users, guest sessions, typing history, user data, settings, passages.

Revision ID: 001
Revises:
Create Date: 2025-09-14

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _owner_columns():
    return [
        sa.Column("user_id", sa.String(36), nullable=True),
        sa.Column("guest_id", sa.String(36), nullable=True),
    ]


def _owner_fks():
    return [
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["guest_id"], ["guest_sessions.id"]),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("is_guest", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "guest_sessions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("data", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("last_activity", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "typing_history",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_owner_columns(),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("word_count", sa.Integer(), nullable=True),
        sa.Column("wpm", sa.Integer(), nullable=True),
        sa.Column("accuracy", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        *_owner_fks(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_typing_history_user_id"), "typing_history", ["user_id"], unique=False)
    op.create_index(op.f("ix_typing_history_guest_id"), "typing_history", ["guest_id"], unique=False)

    op.create_table(
        "user_data",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(36), nullable=True),
        sa.Column("data_type", sa.String(255), nullable=False),
        sa.Column("data_content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "data_type", name="user_data_user_id_data_type_key"),
    )

    op.create_table(
        "user_settings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_owner_columns(),
        sa.Column("settings", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        *_owner_fks(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
        sa.UniqueConstraint("guest_id"),
    )

    op.create_table(
        "passages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_owner_columns(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("word_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        *_owner_fks(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_passages_user_id"), "passages", ["user_id"], unique=False)
    op.create_index(op.f("ix_passages_guest_id"), "passages", ["guest_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_passages_guest_id"), table_name="passages")
    op.drop_index(op.f("ix_passages_user_id"), table_name="passages")
    op.drop_table("passages")
    op.drop_table("user_settings")
    op.drop_table("user_data")
    op.drop_index(op.f("ix_typing_history_guest_id"), table_name="typing_history")
    op.drop_index(op.f("ix_typing_history_user_id"), table_name="typing_history")
    op.drop_table("typing_history")
    op.drop_table("guest_sessions")
    op.drop_table("users")
