"""
Chirper Backend: Account Service
================================

What:  Registration and credential-check rules for accounts.
How:   Validates the candidate, then delegates to AccountRepository.
       Rejections are raised as ValidationError (→ 400) or
       AuthenticationError (→ 401); the route layer never inspects reasons.
Who:   Called by the /register and /login routes, and by POST /messages to
       confirm that posted_by names an existing account.

Registration rules:
    1. username is not blank (empty or whitespace only)
    2. password is at least `password_min_length` characters after trimming
    3. no account with that username exists yet
    4. the insert itself succeeds
"""

import logging
from typing import Optional

from app.config import Settings, settings
from app.exceptions import AuthenticationError, ValidationError
from app.repositories.account_repository import AccountRepository
from app.schemas.account import AccountCredentials, AccountResponse

logger = logging.getLogger(__name__)


class AccountService:
    """
    Business logic layer for account operations.

    Responsibilities:
        - register(): validate and create a new account
        - authenticate(): match username and password against a stored account
        - get_account(): existence check used by message posting
    """

    def __init__(self, accounts: AccountRepository, config: Settings = settings):
        self.accounts = accounts
        self.config = config

    async def register(self, credentials: AccountCredentials) -> AccountResponse:
        """
        Create a new account.

        Returns:
            AccountResponse including the generated account_id

        Raises:
            ValidationError: any registration rule failed or the insert failed
        """
        username = credentials.username
        password = credentials.password

        if not username.strip():
            raise ValidationError(message="Username must not be blank", field="username")

        if len(password.strip()) < self.config.password_min_length:
            raise ValidationError(
                message=(
                    f"Password must be at least {self.config.password_min_length} "
                    "characters long"
                ),
                field="password",
            )

        if await self.accounts.find_by_username(username) is not None:
            raise ValidationError(
                message="Username is already taken",
                field="username",
                context={"username": username},
            )

        account = await self.accounts.insert(username=username, password=password)
        if account is None:
            raise ValidationError(
                message="Account could not be created",
                context={"username": username},
            )

        return AccountResponse.model_validate(account)

    async def authenticate(self, credentials: AccountCredentials) -> AccountResponse:
        """
        Check credentials against the stored account.

        The password comparison is an exact string match.

        Raises:
            AuthenticationError: unknown username or wrong password
        """
        account = await self.accounts.find_by_username(credentials.username)
        if account is None:
            raise AuthenticationError(context={"reason": "unknown_username"})
        if account.password != credentials.password:
            raise AuthenticationError(
                context={"reason": "password_mismatch", "account_id": account.account_id}
            )

        logger.info("Account %s logged in", account.account_id)
        return AccountResponse.model_validate(account)

    async def get_account(self, account_id: int) -> Optional[AccountResponse]:
        """Account by id, or None when it does not exist."""
        account = await self.accounts.find_by_account_id(account_id)
        if account is None:
            return None
        return AccountResponse.model_validate(account)
