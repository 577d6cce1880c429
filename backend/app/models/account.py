"""
Chirper Backend: Account SQLAlchemy Model
=========================================

What:  ORM model representing the `account` table.
Who:   Used by AccountRepository and by Alembic for schema management.

Table Design:
    - account_id: integer primary key generated by the database on insert
    - username: unique across all accounts; the unique constraint also backs
      the lookup performed on every login and registration
    - password: stored as supplied (no hashing is part of this service)
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Account(Base):
    """
    A registered user.

    Lifecycle:
        Created by POST /register. Never updated or deleted by this service.
    """

    __tablename__ = "account"

    account_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Generated account identifier",
    )

    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Unique login name",
    )

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Plain-text password, compared exactly on login",
    )

    def __repr__(self) -> str:
        # password intentionally left out of debug output
        return f"<Account(account_id={self.account_id}, username='{self.username}')>"
