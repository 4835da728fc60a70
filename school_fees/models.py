"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Python attributes are snake_case; the JSON names exposed by the API
(`feePaid`, `createdAt`, ...) live in `schemas`.
"""

from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Student(SQLModel, table=True):
    """A student and their fee balance.

    Fields:
    - `fees`: total amount owed
    - `fee_paid`: cumulative amount paid; only ever increased
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=255)
    fees: float = Field(nullable=False)
    fee_paid: Optional[float] = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class User(SQLModel, table=True):
    """A registered user. No route reads or writes this table."""
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, nullable=False, unique=True, max_length=255)
    password_hash: str = Field(nullable=False, max_length=255)
    is_admin: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
