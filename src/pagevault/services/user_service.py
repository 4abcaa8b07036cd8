"""User service — registration and credential checks.

Learn: This is the credential store. It owns the only code paths that
touch password hashes:
1. register() hashes the password and inserts the user in one statement;
   the unique index on users.email is what detects duplicates
2. verify_credentials() looks the user up and compares hashes

bcrypt is deliberately slow, so hashing runs in a worker thread to keep
the event loop free for other requests.
"""

import asyncio
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pagevault.auth.password import (
    DEFAULT_ROUNDS,
    dummy_hash,
    hash_password,
    verify_password,
)
from pagevault.db.models import User
from pagevault.errors import DuplicateEmail, InvalidCredentials, ValidationError

logger = structlog.get_logger()


def normalize_email(email: Optional[str]) -> str:
    """Emails compare case-insensitively, ignoring surrounding whitespace."""
    return (email or "").strip().lower()


class UserService:
    """Business logic for user accounts."""

    def __init__(self, db: AsyncSession, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    async def register(self, email: Optional[str], password: Optional[str]) -> User:
        """Create a user account.

        Raises ValidationError if either field is empty and DuplicateEmail
        if the address is already registered.
        """
        email = normalize_email(email)
        if not email or not password:
            raise ValidationError("Email and password are required.")

        password_hash = await asyncio.to_thread(
            hash_password, password, self.bcrypt_rounds
        )
        user = User(email=email, password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info("auth.register_duplicate")
            raise DuplicateEmail()

        logger.info("auth.registered", user_id=user.id)
        return user

    async def verify_credentials(
        self, email: Optional[str], password: Optional[str]
    ) -> User:
        """Return the user if email and password match.

        Unknown email and wrong password raise the same InvalidCredentials,
        after the same amount of hashing work.
        """
        email = normalize_email(email)
        if not email or not password:
            raise ValidationError("Email and password are required.")

        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalars().first()

        if user is None:
            await asyncio.to_thread(self._check_against_dummy, password)
            logger.info("auth.login_failed")
            raise InvalidCredentials()

        matches = await asyncio.to_thread(verify_password, password, user.password_hash)
        if not matches:
            logger.info("auth.login_failed", user_id=user.id)
            raise InvalidCredentials()

        logger.info("auth.login", user_id=user.id)
        return user

    def _check_against_dummy(self, password: str) -> bool:
        return verify_password(password, dummy_hash(self.bcrypt_rounds))
