# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User service for administrator accounts.

This module provides the UserService that handles:
- Registration of superadmins and school admins
- Login with email and password
- Reading and updating the caller's own profile

The access token issued on registration and login carries the tenancy
claims (user id, role, school id) that the access policy consumes.

Example:
    >>> user_service = UserService(db_session, jwt_manager, password_hasher)
    >>> auth = await user_service.login(LoginRequest(email=..., password=...))
    >>> auth.access_token
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.domains.access.policy import Actor, Role, require_actor
from schoolhub.domains.auth.jwt import JWTManager
from schoolhub.domains.auth.password import PasswordHasher
from schoolhub.domains.errors import ErrorKind, ServiceError
from schoolhub.infrastructure.database.models import School, User
from schoolhub.models.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserProfileResponse,
    UserResponse,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)


class UserServiceError(ServiceError):
    """Base exception for user service errors."""

    pass


class UserExistsError(UserServiceError):
    """Raised when registering with an email or username already in use."""

    kind = ErrorKind.CONFLICT_DUPLICATE
    default_message = "User with this email or username already exists"


class SchoolRequiredError(UserServiceError):
    kind = ErrorKind.VALIDATION_FAILED
    default_message = "School ID is required for school admin"


class InvalidSchoolError(UserServiceError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Invalid school ID"


class InvalidCredentialsError(UserServiceError):
    """Raised on login with an unknown email or a wrong password.

    Both cases share one message so callers cannot probe for accounts.
    """

    kind = ErrorKind.AUTHENTICATION_REQUIRED
    default_message = "Invalid email or password"


class UserNotFoundError(UserServiceError):
    kind = ErrorKind.NOT_FOUND
    default_message = "User not found"


class UserConflictError(UserServiceError):
    kind = ErrorKind.CONFLICT_DUPLICATE
    default_message = "Username or email already in use"


class UserService:
    """Service for administrator registration, login and profiles.

    Attributes:
        _db: Async database session.
        _jwt: Token issuer.
        _hasher: Password hasher.
    """

    def __init__(
        self,
        db: AsyncSession,
        jwt_manager: JWTManager,
        password_hasher: PasswordHasher,
    ) -> None:
        self._db = db
        self._jwt = jwt_manager
        self._hasher = password_hasher

    async def register_user(self, request: RegisterRequest) -> AuthResponse:
        """Create an administrator account and issue a token.

        The school is only recorded for school admins; a school id sent
        with a superadmin registration is checked but not stored.

        Raises:
            UserExistsError: If the email or username is taken.
            SchoolRequiredError: If a school admin has no school.
            InvalidSchoolError: If the school does not exist.
        """
        existing = await self._find_by_email_or_username(request.email, request.username)
        if existing:
            raise UserExistsError()

        if request.role == Role.SCHOOL_ADMIN and not request.school_id:
            raise SchoolRequiredError()

        if request.school_id:
            school = await self._db.get(School, request.school_id)
            if not school:
                raise InvalidSchoolError()

        user = User(
            username=request.username,
            email=request.email,
            password_hash=self._hasher.hash(request.password),
            role=request.role.value,
            school_id=request.school_id if request.role == Role.SCHOOL_ADMIN else None,
        )

        self._db.add(user)
        await self._db.commit()
        await self._db.refresh(user)

        logger.info("User registered: %s (role=%s, school=%s)", user.id, user.role, user.school_id)

        return self._issue_token(user)

    async def login(self, request: LoginRequest) -> AuthResponse:
        """Authenticate with email and password.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong.
        """
        result = await self._db.execute(select(User).where(User.email == request.email))
        user = result.scalar_one_or_none()

        if not user or not self._hasher.verify(request.password, user.password_hash):
            logger.warning("Failed login attempt for %s", request.email)
            raise InvalidCredentialsError()

        logger.info("User logged in: %s", user.id)

        return self._issue_token(user)

    async def get_profile(self, actor: Actor | None) -> UserProfileResponse:
        """Get the caller's profile with the assigned school's name.

        Raises:
            AuthenticationRequiredError: If actor is None.
            UserNotFoundError: If the account no longer exists.
        """
        actor = require_actor(actor)
        user = await self._get_or_raise(actor.user_id)
        return await self._to_profile(user)

    async def update_profile(
        self,
        actor: Actor | None,
        request: UserUpdateRequest,
    ) -> UserProfileResponse:
        """Update the caller's username, email or password.

        Raises:
            AuthenticationRequiredError: If actor is None.
            UserNotFoundError: If the account no longer exists.
            UserConflictError: If the new username or email belongs to someone else.
        """
        actor = require_actor(actor)
        user = await self._get_or_raise(actor.user_id)

        if request.username or request.email:
            other = await self._find_by_email_or_username(
                request.email, request.username, exclude_id=user.id
            )
            if other:
                raise UserConflictError()

        if request.username:
            user.username = request.username
        if request.email:
            user.email = request.email
        if request.password:
            user.password_hash = self._hasher.hash(request.password)

        await self._db.commit()
        await self._db.refresh(user)

        logger.info("User profile updated: %s", user.id)

        return await self._to_profile(user)

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _get_or_raise(self, user_id: str) -> User:
        user = await self._db.get(User, user_id)
        if not user:
            raise UserNotFoundError()
        return user

    async def _find_by_email_or_username(
        self,
        email: str | None,
        username: str | None,
        exclude_id: str | None = None,
    ) -> User | None:
        conditions = []
        if email:
            conditions.append(User.email == email)
        if username:
            conditions.append(User.username == username)
        if not conditions:
            return None

        stmt = select(User).where(or_(*conditions))
        if exclude_id:
            stmt = stmt.where(User.id != exclude_id)
        result = await self._db.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    def _issue_token(self, user: User) -> AuthResponse:
        token = self._jwt.create_access_token(
            user_id=user.id,
            role=user.role,
            school_id=user.school_id,
            username=user.username,
        )
        return AuthResponse(
            user=UserResponse.model_validate(user),
            access_token=token,
            expires_in=self._jwt.expires_in,
        )

    async def _to_profile(self, user: User) -> UserProfileResponse:
        school_name = None
        if user.school_id:
            school = await self._db.get(School, user.school_id)
            school_name = school.name if school else None
        return UserProfileResponse(
            **UserResponse.model_validate(user).model_dump(),
            school_name=school_name,
        )
