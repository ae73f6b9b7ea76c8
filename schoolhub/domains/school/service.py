# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School service for school management.

This module provides the SchoolService that handles:
- School CRUD operations (superadmin only)
- Case-insensitive name uniqueness among active schools
- Live classroom and student counts
- The deactivation guard against schools that still have active children

Example:
    >>> school_service = SchoolService(db_session)
    >>> school = await school_service.create_school(request, actor)
    >>> page = await school_service.list_schools(actor, search="high")
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.config.settings import PaginationSettings
from schoolhub.domains.access.policy import Actor, Role, require_role
from schoolhub.domains.cascade import apply_detach_rules, count_blocking_dependents, is_blocked
from schoolhub.domains.errors import ErrorKind, ServiceError
from schoolhub.infrastructure.database.models import LifecycleStatus, School
from schoolhub.models.common import PageRequest, PaginatedResponse, PaginationMeta
from schoolhub.models.school import (
    SchoolCreateRequest,
    SchoolDeleteResponse,
    SchoolDetailResponse,
    SchoolResponse,
    SchoolUpdateRequest,
)

logger = logging.getLogger(__name__)

SUPERADMIN_ONLY_MESSAGE = "Access denied. Only superadmins can manage schools."

# Columns that cannot be cleared by sending null in an update
REQUIRED_FIELDS = frozenset({"name"})


class SchoolServiceError(ServiceError):
    """Base exception for school service errors."""

    pass


class SchoolNotFoundError(SchoolServiceError):
    """Raised when a school is not found."""

    kind = ErrorKind.NOT_FOUND
    default_message = "School not found"


class SchoolNameExistsError(SchoolServiceError):
    """Raised when an active school already uses the name."""

    kind = ErrorKind.CONFLICT_DUPLICATE
    default_message = "A school with this name already exists"


class SchoolAlreadyInactiveError(SchoolServiceError):
    kind = ErrorKind.INVALID_STATE
    default_message = "School is already inactive"


class SchoolHasActiveDependentsError(SchoolServiceError):
    """Raised when deactivating a school that owns active classrooms or students."""

    kind = ErrorKind.INVALID_STATE
    default_message = (
        "Cannot delete school with active classrooms or students. "
        "Please deactivate or transfer them first."
    )


class SchoolService:
    """Service for managing schools.

    Every public operation requires a superadmin actor. School admins have
    no access to school management at all, not even to their own school.

    Attributes:
        _db: Async database session.
        _pagination: Page size bounds for listings.
    """

    def __init__(
        self,
        db: AsyncSession,
        pagination: PaginationSettings | None = None,
    ) -> None:
        """Initialize the school service.

        Args:
            db: Async database session.
            pagination: Page size bounds, defaults to the standard bounds.
        """
        self._db = db
        self._pagination = pagination or PaginationSettings()

    async def create_school(
        self,
        request: SchoolCreateRequest,
        actor: Actor | None,
    ) -> SchoolResponse:
        """Create a new school.

        Args:
            request: School creation request.
            actor: Acting user.

        Returns:
            Created school response.

        Raises:
            AuthenticationRequiredError: If actor is None.
            RoleNotAllowedError: If the actor is not a superadmin.
            SchoolNameExistsError: If an active school has the same name.
        """
        actor = self._require_superadmin(actor)

        await self._ensure_unique_name(request.name)

        school = School(
            name=request.name,
            address=request.address,
            phone=request.phone,
            email=request.email,
            principal=request.principal,
            established_year=request.established_year,
            status=LifecycleStatus.ACTIVE,
            created_by=actor.user_id,
        )

        self._db.add(school)
        await self._db.commit()
        await self._db.refresh(school)

        logger.info("School created: %s (name=%s) by %s", school.id, school.name, actor.user_id)

        return self._to_response(school)

    async def list_schools(
        self,
        actor: Actor | None,
        is_active: bool | None = None,
        search: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> PaginatedResponse[SchoolResponse]:
        """List schools, newest first.

        Args:
            actor: Acting user.
            is_active: Filter by lifecycle state.
            search: Case-insensitive substring of the name.
            page: Page number, clamped to at least 1.
            limit: Page size, clamped to the configured bounds.

        Returns:
            One page of schools with pagination metadata.
        """
        self._require_superadmin(actor)
        paging = PageRequest.clamp(
            page, limit, self._pagination.default_limit, self._pagination.max_limit
        )

        stmt = select(School)
        if is_active is not None:
            stmt = stmt.where(School.status == LifecycleStatus.from_flag(is_active))
        if search:
            stmt = stmt.where(School.name.ilike(f"%{search}%"))

        # One session cannot run statements concurrently, so count then fetch
        count_stmt = select(func.count()).select_from(stmt.subquery())
        count_result = await self._db.execute(count_stmt)
        total = count_result.scalar() or 0

        stmt = stmt.order_by(School.created_at.desc(), School.id.desc())
        stmt = stmt.offset(paging.offset).limit(paging.limit)
        result = await self._db.execute(stmt)
        schools = result.scalars().all()

        return PaginatedResponse[SchoolResponse](
            items=[self._to_response(school) for school in schools],
            pagination=PaginationMeta.build(paging.page, paging.limit, total),
        )

    async def get_school(self, school_id: str, actor: Actor | None) -> SchoolDetailResponse:
        """Get a school with live counts of its active classrooms and students.

        Raises:
            SchoolNotFoundError: If school not found.
        """
        self._require_superadmin(actor)

        school = await self._get_or_raise(school_id)
        counts = await count_blocking_dependents(self._db, "school", school.id)

        return SchoolDetailResponse(
            **self._to_response(school).model_dump(),
            classroom_count=counts["activeClassrooms"],
            student_count=counts["activeStudents"],
        )

    async def update_school(
        self,
        school_id: str,
        request: SchoolUpdateRequest,
        actor: Actor | None,
    ) -> SchoolResponse:
        """Update a school.

        Only fields present in the request change. Setting ``is_active`` to
        False runs the same guard as delete_school.

        Raises:
            SchoolNotFoundError: If school not found.
            SchoolNameExistsError: If the new name is taken by another active school.
            SchoolHasActiveDependentsError: If deactivating a school with active children.
        """
        actor = self._require_superadmin(actor)

        school = await self._get_or_raise(school_id)
        updates = request.model_dump(exclude_unset=True)
        is_active = updates.pop("is_active", None)

        new_name = updates.get("name")
        if new_name and new_name.lower() != school.name.lower():
            await self._ensure_unique_name(new_name, exclude_id=school.id)

        for field, value in updates.items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(school, field, value)

        if is_active is False and school.is_active:
            await self._deactivate(school)
        elif is_active is True and not school.is_active:
            await self._ensure_unique_name(school.name, exclude_id=school.id)
            school.activate()

        await self._db.commit()
        await self._db.refresh(school)

        logger.info("School updated: %s by %s", school.id, actor.user_id)

        return self._to_response(school)

    async def delete_school(self, school_id: str, actor: Actor | None) -> SchoolDeleteResponse:
        """Deactivate a school (soft delete).

        Never cascades: the call fails while the school owns any active
        classroom or student, reporting both counts.

        Raises:
            SchoolNotFoundError: If school not found.
            SchoolAlreadyInactiveError: If the school is already inactive.
            SchoolHasActiveDependentsError: If active children exist.
        """
        actor = self._require_superadmin(actor)

        school = await self._get_or_raise(school_id)
        if not school.is_active:
            raise SchoolAlreadyInactiveError()

        await self._deactivate(school)
        await self._db.commit()
        await self._db.refresh(school)

        logger.info("School deactivated: %s by %s", school.id, actor.user_id)

        return SchoolDeleteResponse(
            message="School deleted successfully",
            school=self._to_response(school),
        )

    async def find_by_id(self, school_id: str | None) -> School | None:
        """Look up a school without any access check.

        Used by the classroom, student and user services to validate
        references. Not an API operation.
        """
        if not school_id:
            return None
        return await self._db.get(School, school_id)

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    @staticmethod
    def _require_superadmin(actor: Actor | None) -> Actor:
        return require_role(actor, [Role.SUPERADMIN], SUPERADMIN_ONLY_MESSAGE)

    async def _get_or_raise(self, school_id: str) -> School:
        school = await self.find_by_id(school_id)
        if not school:
            raise SchoolNotFoundError()
        return school

    async def _ensure_unique_name(self, name: str, exclude_id: str | None = None) -> None:
        """Reject a name already used by another active school, ignoring case."""
        stmt = select(School.id).where(
            func.lower(School.name) == name.lower(),
            School.status == LifecycleStatus.ACTIVE,
        )
        if exclude_id:
            stmt = stmt.where(School.id != exclude_id)

        result = await self._db.execute(stmt.limit(1))
        if result.scalar_one_or_none() is not None:
            raise SchoolNameExistsError()

    async def _deactivate(self, school: School) -> None:
        counts = await count_blocking_dependents(self._db, "school", school.id)
        if is_blocked(counts):
            raise SchoolHasActiveDependentsError(details=counts)
        apply_detach_rules("school", school)
        school.deactivate()

    @staticmethod
    def _to_response(school: School) -> SchoolResponse:
        return SchoolResponse.model_validate(school)
