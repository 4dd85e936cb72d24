"""
Password hashing utilities using bcrypt.
"""

import asyncio

import bcrypt
from passlib.context import CryptContext

from .exceptions import InvalidArgumentError

# Fixed work factor; tuned at deploy time, never per call
DEFAULT_SALT_ROUNDS = 12
MIN_SALT_ROUNDS = 4
MAX_SALT_ROUNDS = 31


def _check_rounds(rounds: int) -> int:
    if not isinstance(rounds, int) or not MIN_SALT_ROUNDS <= rounds <= MAX_SALT_ROUNDS:
        raise InvalidArgumentError(
            f"bcrypt rounds must be an integer between {MIN_SALT_ROUNDS} and {MAX_SALT_ROUNDS}"
        )
    return rounds


class PasswordHasher:
    """Password hashing and verification using bcrypt."""

    def __init__(self, rounds: int = DEFAULT_SALT_ROUNDS):
        self._rounds = _check_rounds(rounds)
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=self._rounds,
            bcrypt__min_rounds=self._rounds,
        )

    @property
    def rounds(self) -> int:
        return self._rounds

    def generate_salt(self, rounds: int | None = None) -> str:
        """
        Generate a bcrypt salt string.

        Args:
            rounds: Work factor; defaults to the hasher's fixed work factor

        Returns:
            Salt in modular crypt format, e.g. ``$2b$12$<22 chars>``
        """
        if rounds is None:
            rounds = self._rounds
        return bcrypt.gensalt(_check_rounds(rounds)).decode("ascii")

    async def hash_password(self, password: str | None) -> str:
        """
        Hash a password using bcrypt.

        The salt is embedded in the returned hash. Hashing runs in a worker
        thread so the event loop is not blocked for the duration of the
        key derivation.

        Args:
            password: Plain text password to hash

        Returns:
            Hashed password string

        Raises:
            InvalidArgumentError: If password is empty or missing
        """
        if not password:
            raise InvalidArgumentError("invalid password")
        return await asyncio.to_thread(self._context.hash, password)

    async def check_password(self, plain_password: str | None, hashed_password: str | None) -> bool:
        """
        Verify a password against a hash.

        Args:
            plain_password: Plain text password to verify
            hashed_password: Hashed password to check against

        Returns:
            True if password matches, False otherwise

        Raises:
            InvalidArgumentError: If either argument is empty, or the hash
                is not a bcrypt hash
        """
        if not plain_password:
            raise InvalidArgumentError("invalid password")
        if not hashed_password:
            raise InvalidArgumentError("invalid hashed password")
        try:
            return await asyncio.to_thread(self._context.verify, plain_password, hashed_password)
        except (ValueError, TypeError) as e:
            raise InvalidArgumentError("invalid hashed password") from e

    def needs_rehash(self, hashed_password: str) -> bool:
        """
        Check if a password hash needs to be rehashed.

        True when the hash was produced with a different work factor than
        the one this hasher is configured with.

        Args:
            hashed_password: Hashed password to check

        Returns:
            True if rehash is needed, False otherwise
        """
        if not hashed_password:
            raise InvalidArgumentError("invalid hashed password")
        try:
            return self._context.needs_update(hashed_password)
        except (ValueError, TypeError) as e:
            raise InvalidArgumentError("invalid hashed password") from e


# Singleton instance
password_hasher = PasswordHasher()
