# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection functions.

This module provides dependency functions for:
- Database sessions
- Authentication (the request Actor)
- Service instances wired with settings

Example:
    @router.get("/schools")
    async def list_schools(
        actor: CurrentActor,
        service: Annotated[SchoolService, Depends(get_school_service)],
    ):
        ...
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.api.middleware.auth import get_current_actor
from schoolhub.core.config import get_settings
from schoolhub.domains.access import Actor
from schoolhub.domains.auth import JWTManager, PasswordHasher
from schoolhub.domains.classroom import ClassroomService
from schoolhub.domains.errors import AuthenticationRequiredError
from schoolhub.domains.school import SchoolService
from schoolhub.domains.student import StudentService
from schoolhub.domains.user import UserService
from schoolhub.infrastructure.database import get_session

logger = logging.getLogger(__name__)


# =========================================================================
# Database Dependencies
# =========================================================================


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the current request.

    Yields:
        AsyncSession committed when the request succeeds.
    """
    async with get_session() as session:
        yield session


# =========================================================================
# Authentication Dependencies
# =========================================================================


def require_auth(request: Request) -> Actor:
    """Require an authenticated actor.

    Raises:
        AuthenticationRequiredError: If no valid token was presented.
    """
    actor = get_current_actor(request)
    if actor is None:
        raise AuthenticationRequiredError()
    return actor


# =========================================================================
# Service Dependencies
# =========================================================================


def get_jwt_manager() -> JWTManager:
    settings = get_settings()
    return JWTManager(settings.jwt)


def get_password_hasher() -> PasswordHasher:
    settings = get_settings()
    return PasswordHasher(rounds=settings.security.bcrypt_rounds)


def get_school_service(db: AsyncSession = Depends(get_db)) -> SchoolService:
    return SchoolService(db, pagination=get_settings().pagination)


def get_classroom_service(db: AsyncSession = Depends(get_db)) -> ClassroomService:
    settings = get_settings()
    return ClassroomService(
        db,
        pagination=settings.pagination,
        strict_capacity=settings.enforcement.strict_capacity,
    )


def get_student_service(db: AsyncSession = Depends(get_db)) -> StudentService:
    settings = get_settings()
    return StudentService(
        db,
        pagination=settings.pagination,
        strict_capacity=settings.enforcement.strict_capacity,
    )


def get_user_service(
    db: AsyncSession = Depends(get_db),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserService:
    return UserService(db, jwt_manager, password_hasher)


# =========================================================================
# Type Aliases for Dependency Injection
# =========================================================================

CurrentActor = Annotated[Actor, Depends(require_auth)]
Schools = Annotated[SchoolService, Depends(get_school_service)]
Classrooms = Annotated[ClassroomService, Depends(get_classroom_service)]
Students = Annotated[StudentService, Depends(get_student_service)]
Users = Annotated[UserService, Depends(get_user_service)]
