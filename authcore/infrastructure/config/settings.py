"""Application settings and configuration."""
import secrets
from functools import lru_cache

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Environments that must supply every secret explicitly
_STRICT_ENVIRONMENTS = ("production", "staging")


def _generate_dev_secret() -> str:
    """Generate a random signing secret for development use.

    Tokens issued with this key won't survive restarts, which is acceptable
    in development.  Production **must** set explicit secrets via environment
    variables; validate_production_secrets() enforces this.
    """
    return secrets.token_urlsafe(32)


def _generate_dev_encryption_key() -> str:
    """Generate a random 32-byte hex key (aes-256-cbc) for development use."""
    return secrets.token_hex(32)


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    environment: str = "development"  # development, staging, production

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Payload encryption
    encryption_key: str = ""
    encryption_algorithm: str = "aes-256-cbc"

    @field_validator("encryption_key", mode="before")
    @classmethod
    def fill_empty_encryption_key(cls, v: str, info: ValidationInfo) -> str:
        if not v and info.data.get("environment") not in _STRICT_ENVIRONMENTS:
            return _generate_dev_encryption_key()
        return v

    # Authentication / JWT
    jwt_access_secret_key: str = ""
    jwt_refresh_secret_key: str = ""

    @field_validator("jwt_access_secret_key", "jwt_refresh_secret_key", mode="before")
    @classmethod
    def fill_empty_secret(cls, v: str, info: ValidationInfo) -> str:
        """Generate a random secret when no value is provided.

        This keeps development functional without a .env file while ensuring
        production never silently falls back to a guessable default.
        """
        if not v and info.data.get("environment") not in _STRICT_ENVIRONMENTS:
            return _generate_dev_secret()
        return v

    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 30
    jwt_refresh_token_expire_days: int = 7

    # Password hashing (bcrypt work factor)
    password_hash_rounds: int = 12

    @field_validator("password_hash_rounds")
    @classmethod
    def check_hash_rounds(cls, v: int) -> int:
        if not 4 <= v <= 31:
            raise ValueError("PASSWORD_HASH_ROUNDS must be between 4 and 31")
        return v

    # Login throttling
    login_max_failed_attempts: int = 5
    login_block_minutes: int = 15

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment == "development"

    def validate_production_secrets(self) -> None:
        """Validate that production secrets are configured.

        Called automatically by get_settings().  In production/staging the
        process refuses to start unless explicit, strong secrets are provided
        via environment variables.
        """
        if self.environment not in _STRICT_ENVIRONMENTS:
            return

        if not self.encryption_key:
            raise ValueError("ENCRYPTION_KEY is required in production!")
        if len(self.jwt_access_secret_key) < 32:
            raise ValueError(
                "JWT_ACCESS_SECRET_KEY must be set to at least 32 characters in production!"
            )
        if len(self.jwt_refresh_secret_key) < 32:
            raise ValueError(
                "JWT_REFRESH_SECRET_KEY must be set to at least 32 characters in production!"
            )
        if self.jwt_access_secret_key == self.jwt_refresh_secret_key:
            raise ValueError("JWT_ACCESS_SECRET_KEY and JWT_REFRESH_SECRET_KEY must differ!")
        if self.password_hash_rounds < 10:
            raise ValueError("PASSWORD_HASH_ROUNDS must be at least 10 in production!")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Automatically validates that production/staging deployments have
    proper secrets configured.
    """
    s = Settings()
    s.validate_production_secrets()
    return s
