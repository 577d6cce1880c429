"""
Chirper Backend: Repositories (Data Access Layer)
=================================================

What:  One class per table, translating domain operations into parameterized
       SQLAlchemy statements against the session they were constructed with.

Repository Inventory:
    - AccountRepository: find by id / username, insert
    - MessageRepository: list, list by author, find, insert, update text, delete

Failure Contract:
    A statement that raises SQLAlchemyError is logged, the session is rolled
    back, and the method returns its "absent" value (None, [], False).
    Callers never see a database exception from this layer.
"""

from app.repositories.account_repository import AccountRepository
from app.repositories.message_repository import MessageRepository

__all__ = ["AccountRepository", "MessageRepository"]
