"""
Exceptions raised by the security primitives.
"""


class AuthCoreError(Exception):
    """Base exception for authcore errors."""

    pass


class InvalidArgumentError(AuthCoreError, ValueError):
    """Raised when a required input is missing, empty, or out of range."""

    pass


class DecryptionError(AuthCoreError):
    """Raised when a payload cannot be decrypted (wrong key, IV, or corrupted data)."""

    pass


class DeserializationError(AuthCoreError):
    """Raised when decrypted content is not valid JSON."""

    pass


class SigningError(AuthCoreError):
    """Raised when a token cannot be signed."""

    pass


class VerificationError(AuthCoreError):
    """Raised when a token signature is invalid, expired, or malformed."""

    pass
