"""Security utilities for password hashing and secret masking.

Password hashing uses passlib's bcrypt scheme with the work factor taken from
``settings.BCRYPT_ROUNDS``.
"""

import hashlib

from passlib.context import CryptContext

from wetask.core.config.settings import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        str: Bcrypt-hashed password
    """
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Uses bcrypt's constant-time comparison. A malformed stored hash counts as
    a mismatch rather than an error.
    """
    try:
        return pwd_context.verify(password, hashed_password)
    except ValueError:
        return False


def sha256_hex(value: str) -> str:
    """Hex SHA-256 digest, used to store refresh tokens without keeping them."""
    return hashlib.sha256(value.encode()).hexdigest()


def mask_secret(value: str, visible: int = 6) -> str:
    """Keep the first few characters of a token for log correlation."""
    if not value:
        return ""
    return value[:visible] + "***"


def mask_email(email: str) -> str:
    """``alice@example.com`` -> ``a***@example.com``."""
    local, _, domain = email.partition("@")
    if not domain:
        return mask_secret(email, 1)
    return f"{local[:1]}***@{domain}"
