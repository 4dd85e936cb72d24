"""
Pytest configuration and shared fixtures for authcore tests.
"""

import sys
from datetime import timedelta
from pathlib import Path

# Add repository root to path for imports
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

import pytest

from authcore.infrastructure.config import get_settings
from authcore.security import (
    EncryptionService,
    LoginThrottle,
    PasswordHasher,
    TokenConfig,
    TokenService,
)

# Example key: 32 bytes, hex encoded (aes-256-cbc)
TEST_ENCRYPTION_KEY = "6b42ea8281fb0056b868e1614a1dfe58c47d74536e979af8b193828050db5d31"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings and service getters are lru_cached; isolate each test."""
    from authcore import services

    get_settings.cache_clear()
    for getter in (
        services.get_password_hasher,
        services.get_encryption_service,
        services.get_token_service,
        services.get_login_throttle,
    ):
        getter.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def password_hasher() -> PasswordHasher:
    """Hasher with the minimum bcrypt work factor to keep tests fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def encryption_key() -> str:
    return TEST_ENCRYPTION_KEY


@pytest.fixture
def encryption_service(encryption_key) -> EncryptionService:
    return EncryptionService(encryption_key=encryption_key)


@pytest.fixture
def token_config() -> TokenConfig:
    return TokenConfig(
        access_secret="test-access-secret-key-for-testing-only",
        refresh_secret="test-refresh-secret-key-for-testing-only",
    )


@pytest.fixture
def token_service(token_config: TokenConfig) -> TokenService:
    return TokenService(token_config)


@pytest.fixture
def throttle():
    """Throttle with the default policy; pending timers are cancelled on teardown."""
    instance = LoginThrottle(max_failed_attempts=5, block_duration=timedelta(minutes=15))
    yield instance
    instance.clear()
