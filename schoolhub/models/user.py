# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User registration, login and profile models."""

from typing import Annotated

from pydantic import AfterValidator, ConfigDict, StringConstraints

from schoolhub.domains.access.policy import Role
from schoolhub.models.common import (
    CamelModel,
    LowerEmail,
    ObjectId,
    UtcDatetime,
    validate_password_strength,
)

Username = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=3, max_length=20, pattern=r"^[a-zA-Z0-9_]+$"),
]
Password = Annotated[
    str,
    StringConstraints(min_length=8, max_length=100),
    AfterValidator(validate_password_strength),
]


class RegisterRequest(CamelModel):
    """Request body for creating an administrator account."""

    model_config = ConfigDict(str_strip_whitespace=False)

    username: Username
    email: LowerEmail
    password: Password
    role: Role
    school_id: ObjectId | None = None


class LoginRequest(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=False)

    email: LowerEmail
    password: str


class UserUpdateRequest(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=False)

    username: Username | None = None
    email: LowerEmail | None = None
    password: Password | None = None


class UserResponse(CamelModel):
    """Public view of a user. Never carries the password hash."""

    id: str
    username: str
    email: str
    role: Role
    school_id: str | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class UserProfileResponse(UserResponse):
    school_name: str | None = None


class AuthResponse(CamelModel):
    user: UserResponse
    access_token: str
    token_type: str = "Bearer"
    expires_in: int
