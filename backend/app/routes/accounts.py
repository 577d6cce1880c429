"""
Chirper Backend: Account Route Handlers
=======================================

What:  POST /register and POST /login.
How:   FastAPI validates the JSON body into AccountCredentials; the handler
       calls AccountService and returns the account. Rejections raised by the
       service are turned into empty 400/401 responses by the global handlers.
"""

import logging

from fastapi import APIRouter, Depends

from app.dependencies import get_account_service
from app.schemas.account import AccountCredentials, AccountResponse
from app.schemas.common import ErrorResponse
from app.services.account_service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Accounts"])


@router.post(
    "/register",
    response_model=AccountResponse,
    responses={
        200: {"description": "Account created", "model": AccountResponse},
        400: {"description": "Malformed request (JSON error body). Rule rejections also answer 400, with an empty body", "model": ErrorResponse},
    },
    summary="Register a new account",
)
async def register(
    credentials: AccountCredentials,
    accounts: AccountService = Depends(get_account_service),
) -> AccountResponse:
    """
    Register an account.

    Rejected with 400 when the username is blank, the trimmed password is
    shorter than four characters, or the username is already taken.
    """
    return await accounts.register(credentials)


@router.post(
    "/login",
    response_model=AccountResponse,
    responses={
        200: {"description": "Credentials matched", "model": AccountResponse},
        401: {"description": "Unknown username or wrong password (empty body)"},
    },
    summary="Log in with username and password",
)
async def login(
    credentials: AccountCredentials,
    accounts: AccountService = Depends(get_account_service),
) -> AccountResponse:
    return await accounts.authenticate(credentials)
