"""
Chirper Backend: Message Service
================================

What:  Validation and orchestration for message create/read/update/delete.
How:   Applies the text rules, then delegates to MessageRepository.
       Reads that find nothing return None (the route answers 200 with an
       empty body); rule failures raise ValidationError (→ 400).
Who:   Called by the /messages and /accounts/{account_id}/messages routes.

Text length bounds:
    create: stripped length must be <= message_text_max_length
    update: raw length must be <  message_text_max_length
    With the default of 255, a 255-character text can be posted but not
    patched in. Both bounds read the same setting.

Flows:
    delete: find (row-locked) → delete → return the pre-deletion row
    update: find (row-locked) → validate → update → re-find → return new row
"""

import logging
from typing import List, Optional

from app.config import Settings, settings
from app.exceptions import ValidationError
from app.repositories.message_repository import MessageRepository
from app.schemas.message import MessageCreate, MessageResponse

logger = logging.getLogger(__name__)


class MessageService:
    """Business logic layer for message operations."""

    def __init__(self, messages: MessageRepository, config: Settings = settings):
        self.messages = messages
        self.config = config

    async def post(self, message: MessageCreate) -> MessageResponse:
        """
        Persist a new message.

        The caller has already confirmed that `message.posted_by` refers to an
        existing account.

        Raises:
            ValidationError: blank text, text too long, or insert failure
        """
        text = message.message_text
        if not text.strip():
            raise ValidationError(message="Message text must not be blank", field="message_text")

        if len(text.strip()) > self.config.message_text_max_length:
            raise ValidationError(
                message=(
                    "Message text must be at most "
                    f"{self.config.message_text_max_length} characters"
                ),
                field="message_text",
                context={"length": len(text.strip())},
            )

        created = await self.messages.insert(
            posted_by=message.posted_by,
            message_text=text,
            time_posted_epoch=message.time_posted_epoch,
        )
        if created is None:
            raise ValidationError(
                message="Message could not be created",
                context={"posted_by": message.posted_by},
            )

        return MessageResponse.model_validate(created)

    async def get(self, message_id: int) -> Optional[MessageResponse]:
        """Message by id, or None."""
        message = await self.messages.find_by_message_id(message_id)
        if message is None:
            return None
        return MessageResponse.model_validate(message)

    async def list_all(self) -> List[MessageResponse]:
        messages = await self.messages.find_all()
        return [MessageResponse.model_validate(m) for m in messages]

    async def list_by_account(self, account_id: int) -> List[MessageResponse]:
        messages = await self.messages.find_all_by_posted_by(account_id)
        return [MessageResponse.model_validate(m) for m in messages]

    async def delete(self, message_id: int) -> Optional[MessageResponse]:
        """
        Delete a message and return it as it was before deletion.

        Returns None when no such message exists, so repeated deletes of the
        same id all succeed after the first one removed it.
        """
        message = await self.messages.find_by_message_id(message_id, for_update=True)
        if message is None:
            return None

        # Snapshot before the ORM marks the instance deleted
        deleted = MessageResponse.model_validate(message)
        await self.messages.delete(message_id)
        logger.info("Message %s deleted", message_id)
        return deleted

    async def update(self, message_id: int, message_text: str) -> MessageResponse:
        """
        Replace the text of an existing message.

        Returns:
            The row as stored after the update.

        Raises:
            ValidationError: unknown message_id, blank text, text too long,
                             or no row modified
        """
        existing = await self.messages.find_by_message_id(message_id, for_update=True)
        if existing is None:
            raise ValidationError(
                message="Message does not exist",
                context={"message_id": message_id},
            )

        if not message_text.strip():
            raise ValidationError(message="Message text must not be blank", field="message_text")

        if len(message_text) >= self.config.message_text_max_length:
            raise ValidationError(
                message=(
                    "Message text must be shorter than "
                    f"{self.config.message_text_max_length} characters"
                ),
                field="message_text",
                context={"length": len(message_text)},
            )

        updated = await self.messages.update_text(message_id, message_text)
        if not updated:
            raise ValidationError(
                message="Message could not be updated",
                context={"message_id": message_id},
            )

        refreshed = await self.messages.find_by_message_id(message_id)
        if refreshed is None:
            raise ValidationError(
                message="Message disappeared during update",
                context={"message_id": message_id},
            )
        return MessageResponse.model_validate(refreshed)
