"""
Chirper Backend: Account Repository
===================================

What:  Lookups and inserts against the `account` table.
Who:   Constructed per request by app.dependencies and used by AccountService.

Query plan:
    find_by_account_id → SELECT ... WHERE account_id = :id   (primary key)
    find_by_username   → SELECT ... WHERE username = :name   (unique index)
    insert             → INSERT ... RETURNING account_id      (via flush)
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.account import Account

logger = logging.getLogger(__name__)


class AccountRepository:
    """Data access for accounts, bound to one request's session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_account_id(self, account_id: int) -> Optional[Account]:
        """Single-row lookup by primary key; None when absent or on store failure."""
        try:
            result = await self.session.execute(
                select(Account).where(Account.account_id == account_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to look up account %s: %s", account_id, str(e))
            await self.session.rollback()
            return None

    async def find_by_username(self, username: str) -> Optional[Account]:
        """Single-row lookup by unique username; None when absent or on store failure."""
        try:
            result = await self.session.execute(
                select(Account).where(Account.username == username)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to look up account by username: %s", str(e))
            await self.session.rollback()
            return None

    async def insert(self, username: str, password: str) -> Optional[Account]:
        """
        Insert a new account and return it with its generated account_id.

        The flush sends the INSERT inside the request transaction so the id is
        available immediately; the commit happens when the handler returns.

        Returns:
            The persisted Account, or None if the insert failed (for example a
            unique-constraint violation from a concurrent registration).
        """
        account = Account(username=username, password=password)
        try:
            self.session.add(account)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to insert account '%s': %s", username, str(e))
            await self.session.rollback()
            return None

        logger.info("Account %s created for '%s'", account.account_id, username)
        return account
