"""
Security utilities for authentication and authorization.
"""

from .encryption import EncryptedEnvelope, EncryptionConfig, EncryptionService
from .exceptions import (
    AuthCoreError,
    DecryptionError,
    DeserializationError,
    InvalidArgumentError,
    SigningError,
    VerificationError,
)
from .password import PasswordHasher
from .secure_random import random_bytes, random_bytes_as_token
from .throttle import LoginThrottle, ThrottleEntry
from .tokens import TokenConfig, TokenService

__all__ = [
    "AuthCoreError",
    "DecryptionError",
    "DeserializationError",
    "EncryptedEnvelope",
    "EncryptionConfig",
    "EncryptionService",
    "InvalidArgumentError",
    "LoginThrottle",
    "PasswordHasher",
    "SigningError",
    "ThrottleEntry",
    "TokenConfig",
    "TokenService",
    "VerificationError",
    "random_bytes",
    "random_bytes_as_token",
]
