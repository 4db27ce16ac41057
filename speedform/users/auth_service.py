"""Credential lookup against the users collection."""

from __future__ import annotations

from loguru import logger

from speedform.core.password import verify_password
from speedform.storage.base import USERS, Storage
from speedform.users.errors import AuthenticationFailed
from speedform.users.models import User


def authenticate(storage: Storage, email: str, password: str) -> User:
    """Look up a user by email and verify the password.

    Args:
        storage: Data store holding the users collection
        email: Login email, matched exactly as stored after trimming whitespace
        password: Plain text password

    Returns:
        The matching User

    Raises:
        AuthenticationFailed: If no user matches or the password is wrong
        StorageFailure: If the lookup is rejected
    """
    normalized = email.strip()
    if not normalized or not password:
        raise AuthenticationFailed()

    rows = storage.query(USERS, {"email": normalized})
    if not rows:
        logger.warning("Sign-in rejected: unknown email")
        raise AuthenticationFailed()

    user = User.model_validate(rows[0])
    if not verify_password(password, user.password_hash):
        logger.warning(f"Sign-in rejected for user {user.id}: wrong password")
        raise AuthenticationFailed()

    logger.info(f"User {user.id} signed in as {user.role}")
    return user
