"""
Chirper Backend: Message Repository
===================================

What:  Reads and writes against the `message` table.
Who:   Constructed per request by app.dependencies and used by MessageService.

Ordering:
    List queries return rows ordered by message_id (insertion order), which
    keeps responses stable across databases.

Row locking:
    find_by_message_id(for_update=True) emits SELECT ... FOR UPDATE so that
    the update and delete flows hold the row until the request commits.
    SQLite has no row locks and compiles the clause away.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.message import Message

logger = logging.getLogger(__name__)


class MessageRepository:
    """Data access for messages, bound to one request's session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all(self) -> List[Message]:
        """Every message; an empty list when the table is empty or the query fails."""
        try:
            result = await self.session.execute(
                select(Message).order_by(Message.message_id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Failed to list messages: %s", str(e))
            await self.session.rollback()
            return []

    async def find_all_by_posted_by(self, account_id: int) -> List[Message]:
        """Messages whose posted_by equals `account_id`; may be empty."""
        try:
            result = await self.session.execute(
                select(Message)
                .where(Message.posted_by == account_id)
                .order_by(Message.message_id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Failed to list messages for account %s: %s", account_id, str(e))
            await self.session.rollback()
            return []

    async def find_by_message_id(
        self, message_id: int, for_update: bool = False
    ) -> Optional[Message]:
        """
        Single-row lookup by primary key.

        populate_existing refreshes an instance already in the session's
        identity map, so a re-fetch after update_text sees the new text.
        """
        stmt = (
            select(Message)
            .where(Message.message_id == message_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()

        try:
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to look up message %s: %s", message_id, str(e))
            await self.session.rollback()
            return None

    async def insert(
        self, posted_by: int, message_text: str, time_posted_epoch: int
    ) -> Optional[Message]:
        """Insert a message and return it with its generated message_id, or None on failure."""
        message = Message(
            posted_by=posted_by,
            message_text=message_text,
            time_posted_epoch=time_posted_epoch,
        )
        try:
            self.session.add(message)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to insert message for account %s: %s", posted_by, str(e))
            await self.session.rollback()
            return None

        logger.info("Message %s posted by account %s", message.message_id, posted_by)
        return message

    async def delete(self, message_id: int) -> None:
        """Delete the row with `message_id`; a no-op when it does not exist."""
        try:
            await self.session.execute(
                delete(Message).where(Message.message_id == message_id)
            )
        except SQLAlchemyError as e:
            logger.error("Failed to delete message %s: %s", message_id, str(e))
            await self.session.rollback()

    async def update_text(self, message_id: int, message_text: str) -> bool:
        """Replace message_text; True iff at least one row was modified."""
        try:
            result = await self.session.execute(
                update(Message)
                .where(Message.message_id == message_id)
                .values(message_text=message_text)
            )
        except SQLAlchemyError as e:
            logger.error("Failed to update message %s: %s", message_id, str(e))
            await self.session.rollback()
            return False

        return result.rowcount > 0
