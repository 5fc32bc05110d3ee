from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel, UniqueConstraint

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 150


class User(SQLModel, table=True):
    """A user record. ``id`` and ``created_at`` stay ``None`` until the first successful insert."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uk_users_email"),
        # AUTOINCREMENT keeps SQLite from handing out a deleted row's id again
        {"sqlite_autoincrement": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=NAME_MAX_LENGTH, nullable=False)
    email: str = Field(max_length=EMAIL_MAX_LENGTH, nullable=False)
    age: int = Field(nullable=False)
    # Naive UTC, stamped by the gateway inside the insert's unit of work, never rewritten
    created_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(), nullable=False)
    )
