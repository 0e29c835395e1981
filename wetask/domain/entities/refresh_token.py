from datetime import datetime, timezone  # For timestamp fields
from typing import Optional  # For optional fields

from sqlalchemy import DateTime, ForeignKey, Integer, text  # For explicit column types
from sqlmodel import Column, Field, Index, SQLModel, String  # For ORM and table definition


class RefreshToken(SQLModel, table=True):
    """A single-use refresh token issued to a user.

    Only the SHA-256 hash of the opaque token is stored; the raw value is
    returned to the client once and never persisted. A row is deleted the
    moment its token is exchanged or revoked, so the presence of a row is
    what makes a refresh token usable.

    Attributes:
        id: The unique identifier for the row.
        token_hash: Hex SHA-256 of the opaque refresh token.
        user_id: The owner of the token.
        expires_at: After this instant the token is rejected.
        created_at: When the token was issued.
    """

    __tablename__ = "refresh_tokens"

    id: Optional[int] = Field(default=None, primary_key=True)
    token_hash: str = Field(
        sa_column=Column(String(64), unique=True, nullable=False),
        description="SHA-256 hex digest of the refresh token.",
    )
    user_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key linking the token to its User.",
    )
    expires_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="The timestamp when the refresh token expires.",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(
            DateTime(timezone=True),
            server_default=text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    )

    __table_args__ = (
        Index("ix_refresh_tokens_user_id", "user_id"),
        {"extend_existing": True},
    )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Whether the token's lifetime has elapsed.

        Some drivers (SQLite) hand back naive datetimes; those are read as UTC.
        """
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at <= now
