"""
Chirper Backend: Message Route Handlers
=======================================

What:  Message CRUD plus the per-account message listing.
How:   Each handler parses the body/path, calls MessageService and translates
       the result. Lookups by id that find nothing answer 200 with an empty
       body rather than 404, so GET and DELETE stay idempotent.

Route Inventory:
    POST   /messages                         create
    GET    /messages                         list all
    GET    /messages/{message_id}            fetch one
    DELETE /messages/{message_id}            delete one
    PATCH  /messages/{message_id}            replace text
    GET    /accounts/{account_id}/messages   list by author

Path ids are bounded to the INTEGER column range; a non-numeric or
out-of-range id fails request validation and is answered with 400 by the
RequestValidationError handler.
"""

import logging
from typing import List, Union

from fastapi import APIRouter, Depends, Path, Response

from app.dependencies import get_account_service, get_message_service
from app.exceptions import ValidationError
from app.schemas.common import INT32_MAX, INT32_MIN, ErrorResponse
from app.schemas.message import MessageCreate, MessageResponse, MessageTextUpdate
from app.services.account_service import AccountService
from app.services.message_service import MessageService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Messages"])


def _empty_ok() -> Response:
    """200 with no body: the answer for a message id that does not exist."""
    return Response(status_code=200)


@router.post(
    "/messages",
    response_model=MessageResponse,
    responses={
        200: {"description": "Message created", "model": MessageResponse},
        400: {"description": "Malformed request (JSON error body). Rule rejections also answer 400, with an empty body", "model": ErrorResponse},
    },
    summary="Post a new message",
)
async def create_message(
    message: MessageCreate,
    accounts: AccountService = Depends(get_account_service),
    messages: MessageService = Depends(get_message_service),
) -> MessageResponse:
    """
    Post a message.

    posted_by is checked against the account table here; MessageService
    assumes its caller has done so.
    """
    if await accounts.get_account(message.posted_by) is None:
        raise ValidationError(
            message="posted_by does not refer to an existing account",
            field="posted_by",
            context={"posted_by": message.posted_by},
        )
    return await messages.post(message)


@router.get(
    "/messages",
    response_model=List[MessageResponse],
    summary="List all messages",
)
async def list_messages(
    messages: MessageService = Depends(get_message_service),
) -> List[MessageResponse]:
    return await messages.list_all()


@router.get(
    "/messages/{message_id}",
    response_model=MessageResponse,
    responses={200: {"description": "The message, or an empty body if it does not exist"}},
    summary="Get a message by id",
)
async def get_message(
    message_id: int = Path(ge=INT32_MIN, le=INT32_MAX, description="Message identifier"),
    messages: MessageService = Depends(get_message_service),
) -> Union[MessageResponse, Response]:
    message = await messages.get(message_id)
    if message is None:
        return _empty_ok()
    return message


@router.delete(
    "/messages/{message_id}",
    response_model=MessageResponse,
    responses={200: {"description": "The deleted message, or an empty body if it did not exist"}},
    summary="Delete a message by id",
)
async def delete_message(
    message_id: int = Path(ge=INT32_MIN, le=INT32_MAX, description="Message identifier"),
    messages: MessageService = Depends(get_message_service),
) -> Union[MessageResponse, Response]:
    """
    Delete a message.

    DELETE is idempotent: the first call returns the removed message, any
    later call for the same id returns 200 with an empty body.
    """
    deleted = await messages.delete(message_id)
    if deleted is None:
        return _empty_ok()
    return deleted


@router.patch(
    "/messages/{message_id}",
    response_model=MessageResponse,
    responses={
        200: {"description": "The updated message", "model": MessageResponse},
        400: {"description": "Malformed request (JSON error body). Rule rejections also answer 400, with an empty body", "model": ErrorResponse},
    },
    summary="Replace the text of a message",
)
async def update_message(
    update: MessageTextUpdate,
    message_id: int = Path(ge=INT32_MIN, le=INT32_MAX, description="Message identifier"),
    messages: MessageService = Depends(get_message_service),
) -> MessageResponse:
    return await messages.update(message_id, update.message_text)


@router.get(
    "/accounts/{account_id}/messages",
    response_model=List[MessageResponse],
    summary="List the messages posted by one account",
)
async def list_account_messages(
    account_id: int = Path(ge=INT32_MIN, le=INT32_MAX, description="Author account identifier"),
    messages: MessageService = Depends(get_message_service),
) -> List[MessageResponse]:
    return await messages.list_by_account(account_id)
