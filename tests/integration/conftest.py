# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for database-backed tests.

Services run against a fresh schema per test. The default is an in-memory
SQLite database; set TEST_DATABASE_URL to run against PostgreSQL.
"""

import os
from typing import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from schoolhub.domains.access import Actor, Role
from schoolhub.domains.auth import JWTManager, PasswordHasher
from schoolhub.domains.classroom import ClassroomService
from schoolhub.domains.school import SchoolService
from schoolhub.domains.student import StudentService
from schoolhub.domains.user import UserService
from schoolhub.infrastructure.database.models import Base
from schoolhub.models.classroom import ClassroomCreateRequest, ClassroomResponse
from schoolhub.models.school import SchoolCreateRequest, SchoolResponse
from schoolhub.models.student import StudentCreateRequest, StudentResponse


@pytest.fixture(scope="session")
def test_db_url() -> str:
    """Get database URL for tests."""
    return os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest_asyncio.fixture(scope="function")
async def db_engine(test_db_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine with a fresh schema."""
    if test_db_url.startswith("sqlite"):
        # One shared connection keeps the in-memory database alive
        engine = create_async_engine(
            test_db_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(test_db_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def db_sessionmaker(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(
    db_sessionmaker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for service tests."""
    async with db_sessionmaker() as session:
        yield session
        await session.rollback()


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def school_service(db_session: AsyncSession) -> SchoolService:
    return SchoolService(db_session)


@pytest.fixture
def classroom_service(db_session: AsyncSession) -> ClassroomService:
    return ClassroomService(db_session)


@pytest.fixture
def student_service(db_session: AsyncSession) -> StudentService:
    return StudentService(db_session)


@pytest.fixture
def user_service(
    db_session: AsyncSession,
    jwt_manager: JWTManager,
    password_hasher: PasswordHasher,
) -> UserService:
    return UserService(db_session, jwt_manager, password_hasher)


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def admin_of() -> Callable[..., Actor]:
    """Build school admin actors for a given school."""

    def _admin(school_id: str, user_id: str = "2" * 24) -> Actor:
        return Actor(user_id=user_id, role=Role.SCHOOL_ADMIN, school_id=school_id)

    return _admin


@pytest.fixture
def create_school(
    school_service: SchoolService,
    superadmin: Actor,
) -> Callable[..., Awaitable[SchoolResponse]]:
    """Create schools as the superadmin."""

    async def _create(name: str = "Lincoln HS", **fields) -> SchoolResponse:
        return await school_service.create_school(
            SchoolCreateRequest(name=name, **fields), superadmin
        )

    return _create


@pytest.fixture
def create_classroom(
    classroom_service: ClassroomService,
    superadmin: Actor,
) -> Callable[..., Awaitable[ClassroomResponse]]:
    """Create classrooms as the superadmin."""

    async def _create(
        school_id: str,
        name: str = "Room 1",
        capacity: int = 30,
        **fields,
    ) -> ClassroomResponse:
        return await classroom_service.create_classroom(
            ClassroomCreateRequest(name=name, capacity=capacity, school_id=school_id, **fields),
            superadmin,
        )

    return _create


@pytest.fixture
def enroll(
    student_service: StudentService,
    superadmin: Actor,
) -> Callable[..., Awaitable[StudentResponse]]:
    """Enroll students as the superadmin."""

    async def _enroll(
        school_id: str,
        classroom_id: str | None = None,
        first_name: str = "Ada",
        last_name: str = "Lovelace",
        **fields,
    ) -> StudentResponse:
        return await student_service.enroll_student(
            StudentCreateRequest(
                first_name=first_name,
                last_name=last_name,
                school_id=school_id,
                classroom_id=classroom_id,
                **fields,
            ),
            superadmin,
        )

    return _enroll
