"""
Chirper Backend: Message Request/Response Schemas
=================================================

What:  Pydantic models for the /messages and /accounts/{id}/messages contract.
How:   `MessageCreate` and `MessageTextUpdate` validate request bodies;
       `MessageResponse` is built from ORM rows (`from_attributes`) for every
       message returned by the API.

Text rules (blank, length limits) live in MessageService so that creation and
update can apply their own bounds.
"""

from pydantic import BaseModel, Field

from app.schemas.common import INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN


class MessageCreate(BaseModel):
    """
    What:  Body of POST /messages.
    Note:  A client-supplied message_id is ignored; the database assigns one.
           An omitted time_posted_epoch is stored as 0.
    """
    posted_by: int = Field(
        ge=INT32_MIN, le=INT32_MAX, description="account_id of the author"
    )
    message_text: str = Field(description="Message body")
    time_posted_epoch: int = Field(
        default=0, ge=INT64_MIN, le=INT64_MAX, description="Posting time (epoch)"
    )


class MessageTextUpdate(BaseModel):
    """
    What:  Body of PATCH /messages/{message_id}.
    Note:  Only message_text is read; any other fields are ignored.
    """
    message_text: str = Field(description="Replacement message body")


class MessageResponse(BaseModel):
    """Message JSON returned by every message endpoint."""
    message_id: int = Field(description="Generated message identifier")
    posted_by: int = Field(description="account_id of the author")
    message_text: str = Field(description="Message body")
    time_posted_epoch: int = Field(description="Posting time (epoch)")

    model_config = {"from_attributes": True}
