"""
Cryptographically secure random bytes and tokens.
"""

import secrets

from .encoding import encode_bytes
from .exceptions import InvalidArgumentError

DEFAULT_TOKEN_LENGTH = 32


def random_bytes(length: int = DEFAULT_TOKEN_LENGTH) -> bytes:
    """
    Generate random bytes from the operating system CSPRNG.

    Args:
        length: Number of bytes (must be positive)

    Returns:
        Exactly ``length`` random bytes

    Raises:
        InvalidArgumentError: If length is not a positive integer
    """
    if not isinstance(length, int) or isinstance(length, bool) or length <= 0:
        raise InvalidArgumentError("invalid length")
    return secrets.token_bytes(length)


def random_bytes_as_token(length: int = DEFAULT_TOKEN_LENGTH, encoding: str = "hex") -> str:
    """
    Generate random bytes rendered as a text token.

    Args:
        length: Number of random bytes (must be positive)
        encoding: Text encoding of the token (default: hex)

    Returns:
        Encoded token string
    """
    return encode_bytes(random_bytes(length), encoding)
