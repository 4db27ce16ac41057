"""Password hashing utilities using passlib with bcrypt.

Used for credential lookup against the users collection.
Never stores or logs raw passwords.
"""

from __future__ import annotations

from loguru import logger
from passlib.context import CryptContext

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Hashed password string

    Raises:
        ValueError: If password is empty
    """
    if not password:
        raise ValueError("Password cannot be empty")
    # bcrypt hard limit: 72 bytes
    password = password[:72]
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str | None) -> bool:
    """Verify a password against a stored hash.

    Rows whose stored value is not a recognised hash never match.

    Args:
        plain: Plain text password to verify
        hashed: Stored hash to verify against

    Returns:
        True if password matches, False otherwise
    """
    if not plain or not hashed:
        return False
    if pwd_context.identify(hashed) is None:
        logger.warning("Stored credential is not a recognised password hash; rejecting sign-in")
        return False
    return pwd_context.verify(plain[:72], hashed)
