# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication primitives: JWT tokens and password hashing."""

from schoolhub.domains.auth.jwt import (
    InvalidTokenError,
    JWTError,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)
from schoolhub.domains.auth.password import PasswordHasher

__all__ = [
    "InvalidTokenError",
    "JWTError",
    "JWTManager",
    "PasswordHasher",
    "TokenExpiredError",
    "TokenPayload",
]
