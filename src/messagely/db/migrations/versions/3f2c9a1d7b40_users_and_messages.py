"""users and messages

Creates the two tables. username is the users primary key so duplicate
registrations fail at insert time; messages point at both parties with
foreign keys.

Revision ID: 3f2c9a1d7b40
Revises:
Create Date: 2026-10-19 10:12:44.118204
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2c9a1d7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("username", sa.String(length=50), primary_key=True),
        sa.Column("password", sa.Text(), nullable=False),
        sa.Column("first_name", sa.Text(), nullable=False),
        sa.Column("last_name", sa.Text(), nullable=False),
        sa.Column("phone", sa.Text(), nullable=False),
        sa.Column("join_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "from_username",
            sa.String(length=50),
            sa.ForeignKey("users.username"),
            nullable=False,
        ),
        sa.Column(
            "to_username",
            sa.String(length=50),
            sa.ForeignKey("users.username"),
            nullable=False,
        ),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("idx_messages_from_sent", "messages", ["from_username", "sent_at"])
    op.create_index("idx_messages_to_sent", "messages", ["to_username", "sent_at"])


def downgrade() -> None:
    op.drop_index("idx_messages_to_sent", table_name="messages")
    op.drop_index("idx_messages_from_sent", table_name="messages")
    op.drop_table("messages")
    op.drop_table("users")
