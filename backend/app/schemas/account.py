"""
Chirper Backend: Account Request/Response Schemas
=================================================

What:  Pydantic models for the /register and /login contract.
How:   FastAPI validates request bodies against `AccountCredentials` and
       serializes `AccountResponse` for successful calls. A body that is not
       JSON, or lacks either field, never reaches the service layer.

Business rules (blank username, password length, uniqueness) are checked in
AccountService, not here, so every rejection follows the same 400 path.
"""

from pydantic import BaseModel, Field


class AccountCredentials(BaseModel):
    """
    What:  Body of POST /register and POST /login.
    Who:   Passed unchanged from the route to AccountService.
    """
    username: str = Field(description="Login name")
    password: str = Field(description="Plain-text password")


class AccountResponse(BaseModel):
    """Account JSON returned by /register and /login."""
    account_id: int = Field(description="Generated account identifier")
    username: str = Field(description="Login name")
    password: str = Field(description="Stored password")

    model_config = {"from_attributes": True}
