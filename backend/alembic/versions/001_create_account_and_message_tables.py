"""Create account and message tables

Revision ID: 001
Revises: None
Create Date: 2024-03-01 00:00:00.000000+00:00

What:  Creates the `account` and `message` tables.
How:   Integer autoincrement primary keys, unique username, message.posted_by
       referencing account.account_id.

Rollback: downgrade() drops both tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create account first (message references it), then message and its index.

    Column details mirror app/models/account.py and app/models/message.py.
    """
    op.create_table(
        "account",
        sa.Column(
            "account_id",
            sa.Integer(),
            autoincrement=True,
            nullable=False,
            comment="Generated account identifier",
        ),
        sa.Column(
            "username",
            sa.String(255),
            nullable=False,
            comment="Unique login name",
        ),
        sa.Column(
            "password",
            sa.String(255),
            nullable=False,
            comment="Plain-text password, compared exactly on login",
        ),
        sa.PrimaryKeyConstraint("account_id"),
        sa.UniqueConstraint("username"),
    )

    op.create_table(
        "message",
        sa.Column(
            "message_id",
            sa.Integer(),
            autoincrement=True,
            nullable=False,
            comment="Generated message identifier",
        ),
        sa.Column(
            "posted_by",
            sa.Integer(),
            nullable=False,
            comment="Account that posted the message",
        ),
        sa.Column(
            "message_text",
            sa.Text(),
            nullable=False,
            comment="Message body",
        ),
        sa.Column(
            "time_posted_epoch",
            sa.BigInteger(),
            nullable=False,
            comment="Caller-supplied posting time (epoch)",
        ),
        sa.PrimaryKeyConstraint("message_id"),
        sa.ForeignKeyConstraint(["posted_by"], ["account.account_id"]),
    )

    # GET /accounts/{account_id}/messages filters on posted_by
    op.create_index("idx_message_posted_by", "message", ["posted_by"])


def downgrade() -> None:
    """Drop message (and its index) before account."""
    op.drop_index("idx_message_posted_by", table_name="message")
    op.drop_table("message")
    op.drop_table("account")
