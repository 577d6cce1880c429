"""
Chirper Backend: Request-Scoped Dependency Providers
====================================================

What:  FastAPI `Depends` providers that assemble session → repository → service.
How:   get_db_session yields one session per request; the providers below wrap
       it in repositories and services. FastAPI caches a dependency within a
       request, so the account and message services share the same session
       (and transaction) when a route needs both.

       The session is declared with scope="function": its commit runs when the
       handler returns and before the response is sent, so a failed commit is
       answered with 500 and a 200 is only sent for committed work.

Tests substitute any layer through `app.dependency_overrides`.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.repositories.account_repository import AccountRepository
from app.repositories.message_repository import MessageRepository
from app.services.account_service import AccountService
from app.services.message_service import MessageService


def get_account_repository(
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> AccountRepository:
    return AccountRepository(db)


def get_message_repository(
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> MessageRepository:
    return MessageRepository(db)


def get_account_service(
    accounts: AccountRepository = Depends(get_account_repository),
) -> AccountService:
    return AccountService(accounts)


def get_message_service(
    messages: MessageRepository = Depends(get_message_repository),
) -> MessageService:
    return MessageService(messages)
