import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

from jwt import PyJWTError
from jwt import decode as jwt_decode
from jwt import encode as jwt_encode
from structlog import get_logger

from wetask.core.config.settings import settings
from wetask.core.exceptions import InvalidTokenError
from wetask.domain.entities.user import User
from wetask.utils.security import mask_secret, sha256_hex

logger = get_logger(__name__)


class TokenService:
    """Mints and verifies the credentials of a session.

    Access tokens are short-lived JWTs signed with the shared
    ``JWT_SECRET_KEY``. Refresh tokens are opaque random strings; only their
    SHA-256 hash is ever stored, so this service also owns the hashing rule.

    The service holds no state besides its configuration and performs no I/O;
    persistence of refresh tokens is the caller's concern.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        access_token_ttl: Optional[timedelta] = None,
        refresh_token_ttl: Optional[timedelta] = None,
    ):
        self._secret_key = secret_key or settings.JWT_SECRET_KEY.get_secret_value()
        self._algorithm = algorithm or settings.JWT_ALGORITHM
        self.access_token_ttl = access_token_ttl or timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
        self.refresh_token_ttl = refresh_token_ttl or timedelta(
            days=settings.REFRESH_TOKEN_EXPIRE_DAYS
        )

    def create_access_token(self, user: User, now: Optional[datetime] = None) -> str:
        """Create a signed JWT access token for ``user``.

        Args:
            user: User for whom to create the token. Must have an id.
            now: Issue time; defaults to the current UTC time.

        Returns:
            str: Encoded JWT carrying ``sub``, ``email``, ``name`` and a
            unique ``jti``.
        """
        issued_at = now or datetime.now(timezone.utc)
        jti = uuid.uuid4().hex
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "name": user.name,
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
            "iat": issued_at,
            "exp": issued_at + self.access_token_ttl,
            "jti": jti,
        }
        token = jwt_encode(payload, self._secret_key, algorithm=self._algorithm)
        logger.debug("Access token created", user_id=user.id, jti=mask_secret(jti))
        return token

    def decode_access_token(self, token: str) -> Mapping[str, Any]:
        """Verify signature, expiry, issuer and audience of an access token.

        Raises:
            InvalidTokenError: If any check fails or ``sub`` is not a user id.
        """
        try:
            payload = jwt_decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                issuer=settings.JWT_ISSUER,
                audience=settings.JWT_AUDIENCE,
                options={"require": ["exp", "sub", "jti"]},
            )
        except PyJWTError as e:
            logger.info("JWT validation failed", error=type(e).__name__)
            raise InvalidTokenError() from e

        if not str(payload["sub"]).isdigit():
            logger.warning("JWT subject is not a user id", jti=mask_secret(payload["jti"]))
            raise InvalidTokenError()
        return payload

    @staticmethod
    def generate_refresh_token() -> str:
        """A fresh opaque refresh token (512 random bits, hex encoded)."""
        return secrets.token_hex(64)

    @staticmethod
    def hash_refresh_token(refresh_token: str) -> str:
        return sha256_hex(refresh_token)

    def refresh_token_expiry(self, now: Optional[datetime] = None) -> datetime:
        return (now or datetime.now(timezone.utc)) + self.refresh_token_ttl
