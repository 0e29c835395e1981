"""User Repository implementation using SQLAlchemy.

Implements :class:`~wetask.domain.interfaces.repositories.IUserRepository`
over an async session. Integrity violations on insert are translated into the
domain's ``EmailTakenError``; any other driver error becomes a
``DatabaseError``.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from wetask.core.exceptions import DatabaseError, EmailTakenError
from wetask.domain.entities.user import User
from wetask.domain.interfaces.repositories import IUserRepository

logger = get_logger(__name__)


class UserRepository(IUserRepository):
    """SQLAlchemy implementation of IUserRepository."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def get_by_id(self, user_id: int) -> Optional[User]:
        if user_id <= 0:
            return None
        return await self._first(select(User).where(User.id == user_id), "get_by_id")

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self._first(select(User).where(User.email == email.lower()), "get_by_email")

    async def add(self, user: User) -> User:
        self.db_session.add(user)
        try:
            await self.db_session.commit()
        except IntegrityError as e:
            await self.db_session.rollback()
            logger.info("User insert rejected by unique constraint", error_type=type(e).__name__)
            raise EmailTakenError() from e
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error("Error saving user", error=str(e), operation="add")
            raise DatabaseError() from e
        await self.db_session.refresh(user)
        return user

    async def _first(self, statement, operation: str) -> Optional[User]:
        try:
            result = await self.db_session.execute(statement)
        except SQLAlchemyError as e:
            logger.error("Error retrieving user", error=str(e), operation=operation)
            raise DatabaseError() from e
        user = result.scalars().first()
        logger.debug("User lookup completed", found=user is not None, operation=operation)
        return user
