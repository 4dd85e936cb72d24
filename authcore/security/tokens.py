"""
JWT token service for authentication.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JOSEError, jwt

from .exceptions import SigningError, VerificationError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# Claims set by the service itself; callers may not supply them
RESERVED_CLAIMS = ("iat", "exp", "type")

# Signature and expiry are always checked; caller claims such as sub, aud and
# jti are carried through as-is
DECODE_OPTIONS = {
    "verify_aud": False,
    "verify_sub": False,
    "verify_jti": False,
}


@dataclass(frozen=True)
class TokenConfig:
    """Signing secrets and lifetimes for access and refresh tokens."""

    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    access_expiry: timedelta = timedelta(minutes=30)
    refresh_expiry: timedelta = timedelta(days=7)


class TokenService:
    """Service for creating and validating JWT tokens."""

    def __init__(self, config: TokenConfig):
        """
        Initialize the token service.

        Args:
            config: Secrets, algorithm and expiry settings. Access and refresh
                tokens are signed with separate secrets.
        """
        self._config = config

    @property
    def config(self) -> TokenConfig:
        return self._config

    def _options(self, token_type: str) -> tuple[str, timedelta]:
        if token_type == ACCESS_TOKEN_TYPE:
            return self._config.access_secret, self._config.access_expiry
        return self._config.refresh_secret, self._config.refresh_expiry

    async def _sign(self, payload: Mapping[str, Any], token_type: str) -> str:
        if not isinstance(payload, Mapping):
            raise SigningError("Token payload must be a mapping")

        reserved = [claim for claim in RESERVED_CLAIMS if claim in payload]
        if reserved:
            raise SigningError(f"Token payload already has reserved claims: {', '.join(reserved)}")

        secret, expiry = self._options(token_type)
        now = datetime.now(UTC)
        claims = dict(payload)
        claims.update(
            {
                "iat": now,
                "exp": now + expiry,
                "type": token_type,
            }
        )

        try:
            return jwt.encode(claims, secret, algorithm=self._config.algorithm)
        except (JOSEError, TypeError, ValueError) as e:
            raise SigningError(f"Failed to sign {token_type} token: {e}") from e

    async def _verify(self, token: str, token_type: str) -> dict[str, Any]:
        secret, _ = self._options(token_type)
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self._config.algorithm],
                options=DECODE_OPTIONS,
            )
        except (JOSEError, AttributeError, TypeError, ValueError) as e:
            raise VerificationError(f"Invalid {token_type} token: {e}") from e

        if claims.get("type") != token_type:
            raise VerificationError(f"Token type mismatch: expected {token_type!r}")
        return claims

    async def create_access_token(self, payload: Mapping[str, Any]) -> str:
        """
        Create an access token.

        Args:
            payload: Claims to encode in the token

        Returns:
            Encoded JWT access token

        Raises:
            SigningError: If the payload cannot be signed
        """
        return await self._sign(payload, ACCESS_TOKEN_TYPE)

    async def create_refresh_token(self, payload: Mapping[str, Any]) -> str:
        """
        Create a refresh token, signed with the refresh secret.

        Args:
            payload: Claims to encode in the token

        Returns:
            Encoded JWT refresh token

        Raises:
            SigningError: If the payload cannot be signed
        """
        return await self._sign(payload, REFRESH_TOKEN_TYPE)

    async def create_token_pair(self, payload: Mapping[str, Any]) -> tuple[str, str]:
        """
        Create both access and refresh tokens.

        Returns:
            Tuple of (access_token, refresh_token)
        """
        access_token = await self.create_access_token(payload)
        refresh_token = await self.create_refresh_token(payload)
        return access_token, refresh_token

    async def verify_access_token(self, token: str) -> dict[str, Any]:
        """
        Verify an access token.

        Args:
            token: JWT token to verify

        Returns:
            Decoded claims, including iat, exp and type

        Raises:
            VerificationError: If the signature is invalid, the token expired,
                is malformed, or is not an access token
        """
        return await self._verify(token, ACCESS_TOKEN_TYPE)

    async def verify_refresh_token(self, token: str) -> dict[str, Any]:
        """
        Verify a refresh token.

        Args:
            token: JWT token to verify

        Returns:
            Decoded claims, including iat, exp and type

        Raises:
            VerificationError: If the signature is invalid, the token expired,
                is malformed, or is not a refresh token
        """
        return await self._verify(token, REFRESH_TOKEN_TYPE)

    @staticmethod
    def extract_token_from_header(headers: Mapping[str, str] | None) -> str | None:
        """
        Extract the bearer token from request headers.

        The header name is matched case-insensitively.

        Args:
            headers: Request header mapping

        Returns:
            The token of an ``Authorization: Bearer <token>`` header, or None
            when the header is missing or malformed
        """
        if not headers:
            return None

        bearer_header = None
        for name, value in headers.items():
            if isinstance(name, str) and name.lower() == "authorization":
                bearer_header = value
                break

        if not isinstance(bearer_header, str):
            return None

        parts = bearer_header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return None
        return parts[1]

    async def ensure_token(self, headers: Mapping[str, str] | None) -> dict[str, Any] | None:
        """
        Extract and verify the access token from request headers.

        Unlike verify_access_token(), failures are not raised: callers get the
        claims or None. Use verify_access_token() when the reason matters.

        Args:
            headers: Request header mapping

        Returns:
            Decoded claims, or None if no valid access token was presented
        """
        token = self.extract_token_from_header(headers)
        if token is None:
            return None
        try:
            return await self.verify_access_token(token)
        except VerificationError as e:
            logger.debug("Rejected bearer token: %s", e)
            return None
