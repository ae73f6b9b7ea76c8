# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

Environment defaults are set before any schoolhub module is imported, so
the cached settings and the module-level rate limiter pick them up.
"""

import os

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-only")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SECURITY_BCRYPT_ROUNDS", "4")

from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402
from pydantic import SecretStr  # noqa: E402

from schoolhub.domains.access import Actor, Role  # noqa: E402
from schoolhub.domains.auth import JWTManager, PasswordHasher  # noqa: E402

SCHOOL_A = "a" * 24
SCHOOL_B = "b" * 24


# =============================================================================
# Actor Fixtures
# =============================================================================


@pytest.fixture
def superadmin() -> Actor:
    """Superadmin actor."""
    return Actor(user_id="1" * 24, role=Role.SUPERADMIN)


@pytest.fixture
def school_admin() -> Actor:
    """School admin pinned to SCHOOL_A."""
    return Actor(user_id="2" * 24, role=Role.SCHOOL_ADMIN, school_id=SCHOOL_A)


# =============================================================================
# Auth Fixtures
# =============================================================================


@pytest.fixture
def jwt_settings() -> MagicMock:
    """Create mock JWT settings."""
    settings = MagicMock()
    settings.secret_key = SecretStr("test-secret-key-for-jwt-testing")
    settings.algorithm = "HS256"
    settings.access_token_expire_minutes = 30
    return settings


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    """Create JWT manager with test settings."""
    return JWTManager(jwt_settings)


@pytest.fixture
def password_hasher() -> PasswordHasher:
    """Fast hasher (minimum bcrypt work factor)."""
    return PasswordHasher(rounds=4)


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (in-memory database)"
    )
