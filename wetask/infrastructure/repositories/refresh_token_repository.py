"""Refresh token repository implementation using SQLAlchemy.

Single use is enforced by the database: :meth:`RefreshTokenRepository.consume`
deletes the row by primary key and only hands it back if that delete affected
exactly one row. Two requests racing with the same token therefore cannot
both succeed.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from wetask.core.exceptions import DatabaseError
from wetask.domain.entities.refresh_token import RefreshToken
from wetask.domain.interfaces.repositories import IRefreshTokenRepository

logger = get_logger(__name__)


class RefreshTokenRepository(IRefreshTokenRepository):
    """SQLAlchemy implementation of IRefreshTokenRepository."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def add(self, user_id: int, token_hash: str, expires_at: datetime) -> RefreshToken:
        token = RefreshToken(user_id=user_id, token_hash=token_hash, expires_at=expires_at)
        self.db_session.add(token)
        try:
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error("Error storing refresh token", user_id=user_id, error=str(e))
            raise DatabaseError() from e
        return token

    async def consume(self, token_hash: str) -> Optional[RefreshToken]:
        try:
            result = await self.db_session.execute(
                select(RefreshToken).where(RefreshToken.token_hash == token_hash)
            )
            token = result.scalars().first()
            if token is None:
                return None

            deleted = await self.db_session.execute(
                delete(RefreshToken)
                .where(RefreshToken.id == token.id)
                .execution_options(synchronize_session=False)
            )
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error("Error consuming refresh token", error=str(e))
            raise DatabaseError() from e

        if deleted.rowcount != 1:
            logger.warning("Refresh token consumed concurrently", user_id=token.user_id)
            return None
        return token

    async def revoke(self, token_hash: str) -> bool:
        try:
            result = await self.db_session.execute(
                delete(RefreshToken)
                .where(RefreshToken.token_hash == token_hash)
                .execution_options(synchronize_session=False)
            )
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error("Error revoking refresh token", error=str(e))
            raise DatabaseError() from e
        return result.rowcount > 0
