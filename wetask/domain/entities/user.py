from datetime import datetime, timezone  # For timestamp fields
from typing import Optional  # For optional fields

from sqlalchemy import DateTime, text  # For SQL expressions and explicit DateTime type
from sqlmodel import Column, Field, SQLModel, String  # For ORM and table definition


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """Represents a WeTask account, the aggregate root of the auth context.

    Only the identity part of a user lives here: teams, boards and tasks
    reference users by id from their own services.

    Attributes:
        id: The unique identifier for the user (primary key).
        email: A unique, lower-cased email address used to sign in.
        hashed_password: The bcrypt hash of the user's password.
        name: Display name shown on boards and task cards.
        created_at: When the account was created.
        updated_at: When the account was last modified.
    """

    __tablename__ = "users"

    id: Optional[int] = Field(
        default=None,  # Auto-incremented by database
        primary_key=True,
        description="The unique identifier for the user.",
    )
    email: str = Field(
        sa_column=Column(String(255), unique=True, index=True, nullable=False),
        description="Unique, case-insensitive email address used to sign in.",
    )
    hashed_password: str = Field(
        max_length=255,  # Sufficient for bcrypt hashes
        description="Bcrypt-hashed password.",
    )
    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Display name.",
    )
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(
            DateTime(timezone=True),
            server_default=text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        description="The timestamp of when the user account was created.",
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True),
            onupdate=_utcnow,
            nullable=True,
        ),
        description="The timestamp of the last update to the user's record.",
    )

    __table_args__ = ({"extend_existing": True},)

