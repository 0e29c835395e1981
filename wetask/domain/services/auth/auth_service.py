from dataclasses import dataclass
from typing import Optional

from structlog import get_logger

from wetask.core.config.settings import settings
from wetask.core.exceptions import (
    EmailTakenError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    PasswordPolicyError,
    ValidationError,
)
from wetask.domain.entities.identity import UserIdentity
from wetask.domain.entities.user import User
from wetask.domain.interfaces.repositories import IRefreshTokenRepository, IUserRepository
from wetask.domain.services.auth.token import TokenService
from wetask.domain.value_objects.token_pair import TokenPair
from wetask.utils.security import hash_password, mask_email, mask_secret, verify_password

logger = get_logger(__name__)

# Verified against when the email is unknown, so a miss costs a bcrypt round
# just like a wrong password does.
_DUMMY_HASH = hash_password("wetask-timing-equaliser")


@dataclass(frozen=True)
class AuthResult:
    """A signed-in user together with the session's first token pair."""

    user: User
    tokens: TokenPair


class AuthService:
    """The auth issuer: credentials in, token pairs out.

    Implements the server side of the session protocol:

    * ``register`` and ``login`` open a session and return its first pair.
    * ``exchange`` rotates a refresh token. The presented token is consumed
      before the new pair is minted, so it can never be used twice, even if
      the caller throws the new pair away.
    * ``validate`` resolves an access token to the identity it was issued to.
    * ``logout`` revokes a refresh token.

    Attributes:
        users (IUserRepository): User persistence port.
        refresh_tokens (IRefreshTokenRepository): Refresh token persistence port.
        token_service (TokenService): Mints and verifies tokens.
    """

    def __init__(
        self,
        users: IUserRepository,
        refresh_tokens: IRefreshTokenRepository,
        token_service: Optional[TokenService] = None,
    ):
        self.users = users
        self.refresh_tokens = refresh_tokens
        self.token_service = token_service or TokenService()

    async def register(self, email: str, password: str, name: str) -> AuthResult:
        """Create an account and open its first session.

        Raises:
            EmailTakenError: If the email is already registered.
            PasswordPolicyError: If the password is too short.
            ValidationError: If email or name are blank.
        """
        email = self._normalise_email(email)
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name must not be empty", code="invalid_name")
        if len(password or "") < settings.PASSWORD_MIN_LENGTH:
            raise PasswordPolicyError(
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long"
            )

        if await self.users.get_by_email(email) is not None:
            logger.info("Registration rejected, email taken", email=mask_email(email))
            raise EmailTakenError()

        user = await self.users.add(
            User(email=email, name=name, hashed_password=hash_password(password))
        )
        logger.info("New user registered", user_id=user.id, email=mask_email(email))
        return AuthResult(user=user, tokens=await self._issue_pair(user))

    async def login(self, email: str, password: str) -> AuthResult:
        """Authenticate with email and password.

        Raises:
            InvalidCredentialsError: For an unknown email or a wrong password.
        """
        email = self._normalise_email(email, strict=False)
        user = await self.users.get_by_email(email)
        if user is None:
            verify_password(password, _DUMMY_HASH)
            logger.info("Login failed", email=mask_email(email), reason="unknown_email")
            raise InvalidCredentialsError()
        if not verify_password(password, user.hashed_password):
            logger.info("Login failed", user_id=user.id, reason="wrong_password")
            raise InvalidCredentialsError()

        logger.info("User logged in", user_id=user.id)
        return AuthResult(user=user, tokens=await self._issue_pair(user))

    async def exchange(self, refresh_token: str) -> TokenPair:
        """Trade a refresh token for a brand-new token pair.

        Raises:
            InvalidRefreshTokenError: If the token is unknown, already used,
                expired, or belongs to a user that no longer exists.
        """
        if not refresh_token:
            raise InvalidRefreshTokenError()

        stored = await self.refresh_tokens.consume(
            self.token_service.hash_refresh_token(refresh_token)
        )
        if stored is None:
            logger.warning("Refresh with unknown or reused token", token=mask_secret(refresh_token))
            raise InvalidRefreshTokenError()
        if stored.is_expired():
            logger.info("Refresh with expired token", user_id=stored.user_id)
            raise InvalidRefreshTokenError()

        user = await self.users.get_by_id(stored.user_id)
        if user is None:
            logger.warning("Refresh token owner no longer exists", user_id=stored.user_id)
            raise InvalidRefreshTokenError()

        tokens = await self._issue_pair(user)
        logger.info("Tokens refreshed", user_id=user.id)
        return tokens

    async def validate(self, access_token: str) -> UserIdentity:
        """Resolve an access token to the identity it was issued to.

        Raises:
            InvalidTokenError: If the token fails verification or its user is gone.
        """
        if not access_token:
            raise InvalidTokenError()
        payload = self.token_service.decode_access_token(access_token)
        user = await self.users.get_by_id(int(payload["sub"]))
        if user is None:
            logger.warning("Valid token for missing user", user_id=payload["sub"])
            raise InvalidTokenError("User not found")
        return UserIdentity.from_user(user)

    async def get_user(self, user_id: int) -> User:
        """Load the full user record behind an identity.

        Raises:
            InvalidTokenError: If the user no longer exists.
        """
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise InvalidTokenError("User not found")
        return user

    async def logout(self, refresh_token: str) -> None:
        """Revoke a refresh token. Unknown tokens are ignored."""
        if not refresh_token:
            return
        revoked = await self.refresh_tokens.revoke(
            self.token_service.hash_refresh_token(refresh_token)
        )
        logger.info("Logout", revoked=revoked)

    async def _issue_pair(self, user: User) -> TokenPair:
        refresh_token = self.token_service.generate_refresh_token()
        await self.refresh_tokens.add(
            user_id=user.id,
            token_hash=self.token_service.hash_refresh_token(refresh_token),
            expires_at=self.token_service.refresh_token_expiry(),
        )
        return TokenPair(
            access_token=self.token_service.create_access_token(user),
            refresh_token=refresh_token,
        )

    @staticmethod
    def _normalise_email(email: str, strict: bool = True) -> str:
        email = (email or "").strip().lower()
        if strict and "@" not in email:
            raise ValidationError("Invalid email address", code="invalid_email")
        return email
