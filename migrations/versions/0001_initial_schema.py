"""Create the administration tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-17 00:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _common_columns(table: str) -> list[sa.SchemaItem]:
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "is_deleted", sa.Boolean(), server_default=sa.false(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id", name=op.f(f"pk_{table}")),
    ]


def _foreign_key(table: str, column: str, target: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        [column], [f"{target}.id"], name=op.f(f"fk_{table}_{column}_{target}")
    )


def _index_foreign_keys(table: str, *columns: str) -> None:
    for column in columns:
        op.create_index(op.f(f"ix_{table}_{column}"), table, [column])


def upgrade() -> None:
    op.create_table(
        "rols",
        sa.Column("name", sa.String(length=100), nullable=False),
        *_common_columns("rols"),
    )
    op.create_table(
        "users",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.Column("email", sa.String(length=150), nullable=True),
        sa.Column("password", sa.String(length=255), nullable=True),
        sa.Column("identification", sa.String(length=50), nullable=True),
        sa.Column("phone", sa.String(length=30), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        *_common_columns("users"),
    )
    op.create_table(
        "permissions",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        *_common_columns("permissions"),
    )
    op.create_table(
        "forms",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        *_common_columns("forms"),
    )
    op.create_table(
        "modules",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.Column("code", sa.String(length=50), nullable=True),
        *_common_columns("modules"),
    )
    op.create_table(
        "rol_users",
        sa.Column("rol_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_common_columns("rol_users"),
        _foreign_key("rol_users", "rol_id", "rols"),
        _foreign_key("rol_users", "user_id", "users"),
    )
    _index_foreign_keys("rol_users", "rol_id", "user_id")
    op.create_table(
        "rol_form_permissions",
        sa.Column("rol_id", sa.Integer(), nullable=False),
        sa.Column("form_id", sa.Integer(), nullable=False),
        sa.Column("permission_id", sa.Integer(), nullable=False),
        *_common_columns("rol_form_permissions"),
        _foreign_key("rol_form_permissions", "rol_id", "rols"),
        _foreign_key("rol_form_permissions", "form_id", "forms"),
        _foreign_key("rol_form_permissions", "permission_id", "permissions"),
    )
    _index_foreign_keys("rol_form_permissions", "rol_id", "form_id", "permission_id")
    op.create_table(
        "module_forms",
        sa.Column("module_id", sa.Integer(), nullable=False),
        sa.Column("form_id", sa.Integer(), nullable=False),
        *_common_columns("module_forms"),
        _foreign_key("module_forms", "module_id", "modules"),
        _foreign_key("module_forms", "form_id", "forms"),
    )
    _index_foreign_keys("module_forms", "module_id", "form_id")


def downgrade() -> None:
    for table in (
        "module_forms",
        "rol_form_permissions",
        "rol_users",
        "modules",
        "forms",
        "permissions",
        "users",
        "rols",
    ):
        op.drop_table(table)
