"""
Service instances built from application settings.

Each getter is cached, so a process shares one instance of every service.
The login throttle in particular must be shared: its counters live in memory.
"""

from datetime import timedelta
from functools import lru_cache

from authcore.infrastructure.config import Settings, get_settings
from authcore.security import (
    EncryptionService,
    LoginThrottle,
    PasswordHasher,
    TokenConfig,
    TokenService,
)


def build_token_config(settings: Settings) -> TokenConfig:
    return TokenConfig(
        access_secret=settings.jwt_access_secret_key,
        refresh_secret=settings.jwt_refresh_secret_key,
        algorithm=settings.jwt_algorithm,
        access_expiry=timedelta(minutes=settings.jwt_access_token_expire_minutes),
        refresh_expiry=timedelta(days=settings.jwt_refresh_token_expire_days),
    )


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=get_settings().password_hash_rounds)


@lru_cache
def get_encryption_service() -> EncryptionService:
    settings = get_settings()
    return EncryptionService(
        encryption_key=settings.encryption_key,
        algorithm=settings.encryption_algorithm,
    )


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(build_token_config(get_settings()))


@lru_cache
def get_login_throttle() -> LoginThrottle:
    settings = get_settings()
    return LoginThrottle(
        max_failed_attempts=settings.login_max_failed_attempts,
        block_duration=timedelta(minutes=settings.login_block_minutes),
    )
