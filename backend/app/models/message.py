"""
Chirper Backend: Message SQLAlchemy Model
=========================================

What:  ORM model representing the `message` table.
Who:   Used by MessageRepository and by Alembic for schema management.

Table Design:
    - message_id: integer primary key generated by the database on insert
    - posted_by: foreign key to account.account_id, checked by the handler
      layer at creation time only (no cascade rules)
    - message_text: the post body; length limits live in MessageService
    - time_posted_epoch: caller-supplied timestamp, unit not enforced

    Index on posted_by:
        Backs GET /accounts/{account_id}/messages.
"""

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Message(Base):
    """
    A short text post owned by one account.

    Lifecycle:
        1. Created by POST /messages
        2. message_text replaced by PATCH /messages/{message_id}
        3. Row removed by DELETE /messages/{message_id}
    """

    __tablename__ = "message"

    message_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Generated message identifier",
    )

    posted_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("account.account_id"),
        nullable=False,
        comment="Account that posted the message",
    )

    message_text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Message body",
    )

    time_posted_epoch: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Caller-supplied posting time (epoch)",
    )

    __table_args__ = (
        Index("idx_message_posted_by", "posted_by"),
    )

    def __repr__(self) -> str:
        return (
            f"<Message(message_id={self.message_id}, posted_by={self.posted_by}, "
            f"time_posted_epoch={self.time_posted_epoch})>"
        )
