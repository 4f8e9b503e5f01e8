"""create friendships table

Revision ID: 392349af8917
Revises: 3854834d3c61
Create Date: 2026-10-02 11:27:03.904117

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy import func

# revision identifiers, used by Alembic.
revision: str = '392349af8917'
down_revision: Union[str, Sequence[str], None] = '3854834d3c61'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "friendships",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("friend_user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="requested"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.UniqueConstraint("user_id", "friend_user_id", name="uq_friendships_user_friend"),
        sa.CheckConstraint(
            "status IN ('requested', 'accepted', 'declined')",
            name="ck_friendships_status"
        ),
    )


def downgrade() -> None:
    op.drop_table("friendships")
