"""
Unit tests for environment-driven settings.
"""

import pytest
from pydantic import ValidationError

from authcore.infrastructure.config import Settings, get_settings

STRONG_ACCESS = "a" * 40
STRONG_REFRESH = "b" * 40


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run with no authcore variables set and no .env file in the working directory."""
    for name in (
        "ENVIRONMENT",
        "ENCRYPTION_KEY",
        "ENCRYPTION_ALGORITHM",
        "JWT_ACCESS_SECRET_KEY",
        "JWT_REFRESH_SECRET_KEY",
        "JWT_ALGORITHM",
        "PASSWORD_HASH_ROUNDS",
        "LOGIN_MAX_FAILED_ATTEMPTS",
        "LOGIN_BLOCK_MINUTES",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestDefaults:
    def test_development_defaults(self, clean_env):
        settings = Settings()
        assert settings.is_development
        assert settings.jwt_algorithm == "HS256"
        assert settings.jwt_access_token_expire_minutes == 30
        assert settings.jwt_refresh_token_expire_days == 7
        assert settings.password_hash_rounds == 12
        assert settings.login_max_failed_attempts == 5
        assert settings.login_block_minutes == 15

    def test_development_generates_secrets(self, clean_env):
        settings = Settings()
        assert len(bytes.fromhex(settings.encryption_key)) == 32
        assert settings.jwt_access_secret_key
        assert settings.jwt_refresh_secret_key
        assert settings.jwt_access_secret_key != settings.jwt_refresh_secret_key

    def test_reads_environment(self, clean_env):
        clean_env.setenv("LOGIN_MAX_FAILED_ATTEMPTS", "3")
        clean_env.setenv("JWT_ACCESS_SECRET_KEY", "from-env")
        settings = Settings()
        assert settings.login_max_failed_attempts == 3
        assert settings.jwt_access_secret_key == "from-env"

    def test_rejects_out_of_range_rounds(self, clean_env):
        clean_env.setenv("PASSWORD_HASH_ROUNDS", "40")
        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_is_cached(self, clean_env):
        assert get_settings() is get_settings()


class TestProductionSecrets:
    def _production(self, env, **overrides):
        values = {
            "ENVIRONMENT": "production",
            "ENCRYPTION_KEY": "ab" * 32,
            "JWT_ACCESS_SECRET_KEY": STRONG_ACCESS,
            "JWT_REFRESH_SECRET_KEY": STRONG_REFRESH,
        }
        values.update(overrides)
        for name, value in values.items():
            if value is None:
                env.delenv(name, raising=False)
            else:
                env.setenv(name, value)
        return Settings()

    def test_valid_production_settings(self, clean_env):
        settings = self._production(clean_env)
        settings.validate_production_secrets()
        assert settings.is_production

    def test_missing_secret_is_not_generated(self, clean_env):
        settings = self._production(clean_env, JWT_ACCESS_SECRET_KEY=None)
        assert settings.jwt_access_secret_key == ""
        with pytest.raises(ValueError, match="JWT_ACCESS_SECRET_KEY"):
            settings.validate_production_secrets()

    def test_missing_encryption_key(self, clean_env):
        settings = self._production(clean_env, ENCRYPTION_KEY=None)
        with pytest.raises(ValueError, match="ENCRYPTION_KEY"):
            settings.validate_production_secrets()

    def test_short_refresh_secret(self, clean_env):
        settings = self._production(clean_env, JWT_REFRESH_SECRET_KEY="short")
        with pytest.raises(ValueError, match="JWT_REFRESH_SECRET_KEY"):
            settings.validate_production_secrets()

    def test_shared_secrets_rejected(self, clean_env):
        settings = self._production(clean_env, JWT_REFRESH_SECRET_KEY=STRONG_ACCESS)
        with pytest.raises(ValueError, match="must differ"):
            settings.validate_production_secrets()

    def test_low_work_factor_rejected(self, clean_env):
        settings = self._production(clean_env, PASSWORD_HASH_ROUNDS="8")
        with pytest.raises(ValueError, match="PASSWORD_HASH_ROUNDS"):
            settings.validate_production_secrets()

    def test_get_settings_refuses_weak_production_config(self, clean_env):
        self._production(clean_env, JWT_ACCESS_SECRET_KEY="weak")
        with pytest.raises(ValueError):
            get_settings()
