# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for application settings."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from schoolhub.core.config.settings import (
    DEFAULT_JWT_SECRET,
    CORSSettings,
    DatabaseSettings,
    EnforcementSettings,
    JWTSettings,
    PaginationSettings,
    RateLimitSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)


class TestDatabaseSettings:
    """Tests for DatabaseSettings."""

    def test_default_values(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = DatabaseSettings()

        assert settings.url.startswith("postgresql+asyncpg://")
        assert settings.pool_size == 10
        assert settings.max_overflow == 20
        assert settings.is_sqlite is False

    def test_sqlite_url(self) -> None:
        settings = DatabaseSettings(url="sqlite+aiosqlite:///:memory:")

        assert settings.is_sqlite is True

    def test_env_prefix(self) -> None:
        with patch.dict(os.environ, {"DATABASE_POOL_SIZE": "3"}):
            assert DatabaseSettings().pool_size == 3


class TestJWTSettings:
    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = JWTSettings()

        assert settings.secret_key.get_secret_value() == DEFAULT_JWT_SECRET
        assert settings.algorithm == "HS256"
        assert settings.access_token_expire_minutes == 60 * 24

    def test_expiry_reads_unprefixed_variable(self) -> None:
        with patch.dict(os.environ, {"ACCESS_TOKEN_EXPIRE_MINUTES": "15"}):
            assert JWTSettings().access_token_expire_minutes == 15


class TestSmallerSettings:
    """Defaults of the remaining sub-settings."""

    def test_rate_limit_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = RateLimitSettings()

        assert settings.enabled is True
        assert settings.requests_per_minute == 100
        assert settings.login_per_minute == 10

    def test_pagination_defaults(self) -> None:
        settings = PaginationSettings()

        assert settings.default_limit == 10
        assert settings.max_limit == 100

    def test_strict_capacity_is_opt_in(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert EnforcementSettings().strict_capacity is False
        with patch.dict(os.environ, {"ENFORCEMENT_STRICT_CAPACITY": "true"}):
            assert EnforcementSettings().strict_capacity is True

    def test_cors_origins_list(self) -> None:
        settings = CORSSettings(origins="http://a.example, http://b.example,")

        assert settings.origins_list == ["http://a.example", "http://b.example"]


class TestSettings:
    """Tests for the aggregate Settings."""

    def test_production_rejects_default_secret(self) -> None:
        with patch.dict(os.environ, {"JWT_SECRET_KEY": DEFAULT_JWT_SECRET}):
            with pytest.raises(ValidationError):
                Settings(environment="production")

    def test_production_with_real_secret(self) -> None:
        with patch.dict(os.environ, {"JWT_SECRET_KEY": "a-real-production-secret"}):
            settings = Settings(environment="production")

        assert settings.is_production is True
        assert settings.is_development is False

    def test_get_settings_is_cached(self) -> None:
        clear_settings_cache()
        try:
            assert get_settings() is get_settings()
        finally:
            clear_settings_cache()
