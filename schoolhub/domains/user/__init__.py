# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Administrator accounts: registration, login and profiles."""

from schoolhub.domains.user.service import (
    InvalidCredentialsError,
    InvalidSchoolError,
    SchoolRequiredError,
    UserConflictError,
    UserExistsError,
    UserNotFoundError,
    UserService,
    UserServiceError,
)

__all__ = [
    "InvalidCredentialsError",
    "InvalidSchoolError",
    "SchoolRequiredError",
    "UserConflictError",
    "UserExistsError",
    "UserNotFoundError",
    "UserService",
    "UserServiceError",
]
