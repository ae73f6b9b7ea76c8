# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API endpoints.

This module provides endpoints for:
- POST /register - Create an administrator account
- POST /login - Exchange email and password for an access token

Both endpoints are public and rate limited per client IP.

Example:
    POST /api/v1/auth/login
    {
        "email": "admin@example.com",
        "password": "Secret#123"
    }
"""

import logging

from fastapi import APIRouter, Request, status

from schoolhub.api.dependencies import Users
from schoolhub.api.middleware.rate_limit import RATE_LIMIT_LOGIN, get_ip_only, limiter
from schoolhub.models.user import AuthResponse, LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register administrator",
    description="Create a superadmin or school admin account and return an access token.",
)
@limiter.limit(RATE_LIMIT_LOGIN, key_func=get_ip_only)
async def register(
    request: Request,
    data: RegisterRequest,
    service: Users,
) -> AuthResponse:
    """Register a new administrator.

    Raises:
        UserExistsError: Email or username already taken.
        SchoolRequiredError: School admin without a school.
        InvalidSchoolError: Unknown school.
    """
    return await service.register_user(data)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="User login",
    description="Authenticate with email and password.",
)
@limiter.limit(RATE_LIMIT_LOGIN, key_func=get_ip_only)
async def login(
    request: Request,
    data: LoginRequest,
    service: Users,
) -> AuthResponse:
    return await service.login(data)
