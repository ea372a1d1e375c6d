"""Create socks table.

Revision ID: 7a3c9e1d2b40
Revises:
Create Date: 2024-12-02 10:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision = "7a3c9e1d2b40"
down_revision = None
branch_labels = None
depends_on = None


def _table_exists(table_name: str) -> bool:
    bind = op.get_bind()
    insp = inspect(bind)
    return bool(insp.has_table(table_name))


def upgrade() -> None:
    if _table_exists("socks"):
        return
    op.create_table(
        "socks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("color", sa.String(length=64), nullable=False),
        sa.Column("cotton_part", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint(
            "cotton_part >= 0 AND cotton_part <= 100",
            name="ck_socks_cotton_part_range",
        ),
        sa.CheckConstraint("quantity >= 0", name="ck_socks_quantity_non_negative"),
    )
    op.create_index("ix_socks_id", "socks", ["id"])
    op.create_index("ix_socks_color_cotton_part", "socks", ["color", "cotton_part"])


def downgrade() -> None:
    if not _table_exists("socks"):
        return
    op.drop_index("ix_socks_color_cotton_part", table_name="socks")
    op.drop_index("ix_socks_id", table_name="socks")
    op.drop_table("socks")
