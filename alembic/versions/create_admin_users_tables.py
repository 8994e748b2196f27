"""create admin users / roles / action log tables

Revision ID: 3b8e41c7d2a9
Revises:
Create Date: 2026-10-12 14:21:40.512093

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b8e41c7d2a9'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "admin_roles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("code", sa.String(100), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_admin_roles_code", "admin_roles", ["code"], unique=True)

    op.create_table(
        "admin_users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("firstname", sa.String(100), nullable=False),
        sa.Column("lastname", sa.String(100), nullable=False),
        sa.Column("username", sa.String(100), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("reset_password_token", sa.String(255), nullable=True),
        sa.Column("registration_token", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("blocked", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("prefered_language", sa.String(20), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_by", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_admin_users_email", "admin_users", ["email"])
    op.create_index("ix_admin_users_deleted_at", "admin_users", ["deleted_at"])

    # 탈퇴하지 않은 계정(deleted_at IS NULL) 사이에서만 email unique
    op.create_index(
        "uq_admin_users_email_active",
        "admin_users",
        ["email"],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL"),
        sqlite_where=sa.text("deleted_at IS NULL"),
    )

    op.create_table(
        "admin_users_roles",
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("admin_users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role_id", sa.Uuid(), sa.ForeignKey("admin_roles.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "admin_action_logs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("actor_id", sa.Uuid(), sa.ForeignKey("admin_users.id"), nullable=False),
        sa.Column("target_user_id", sa.Uuid(), sa.ForeignKey("admin_users.id"), nullable=True),
        sa.Column(
            "action",
            sa.Enum("CREATE_USER", "UPDATE_USER", "DELETE_USER", name="admin_action"),
            nullable=False,
        ),
        sa.Column("detail", sa.String(255), nullable=True),
        sa.Column("ip", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    # server_default 제거 - 기본값은 ORM 에서 관리 (SQLite 는 ALTER COLUMN 미지원)
    if op.get_bind().dialect.name != "sqlite":
        op.alter_column("admin_users", "is_active", server_default=None)
        op.alter_column("admin_users", "blocked", server_default=None)


def downgrade():
    op.drop_table("admin_action_logs")
    op.drop_table("admin_users_roles")
    op.drop_index("uq_admin_users_email_active", table_name="admin_users")
    op.drop_index("ix_admin_users_deleted_at", table_name="admin_users")
    op.drop_index("ix_admin_users_email", table_name="admin_users")
    op.drop_table("admin_users")
    op.drop_index("ix_admin_roles_code", table_name="admin_roles")
    op.drop_table("admin_roles")
    sa.Enum(name="admin_action").drop(op.get_bind(), checkfirst=True)
