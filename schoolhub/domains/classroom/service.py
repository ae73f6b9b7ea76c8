# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Classroom service for classroom management.

This module provides the ClassroomService that handles:
- Classroom CRUD operations scoped to the actor's school
- Duplicate name checks within a school and academic year
- Seat accounting (active student count, available seats)
- Capacity checks shared with the student service

Example:
    >>> classroom_service = ClassroomService(db_session)
    >>> classroom = await classroom_service.create_classroom(request, actor)
    >>> await classroom_service.ensure_has_seat(classroom_model)
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.config.settings import PaginationSettings
from schoolhub.domains.access.policy import (
    Actor,
    check_school_access,
    listing_scope,
    require_actor,
    resolve_effective_school,
)
from schoolhub.domains.cascade import apply_detach_rules, count_blocking_dependents, is_blocked
from schoolhub.domains.errors import ErrorKind, ServiceError
from schoolhub.domains.school.service import SchoolNotFoundError, SchoolService
from schoolhub.infrastructure.database.models import Classroom, LifecycleStatus, Student
from schoolhub.models.classroom import (
    ClassroomCreateRequest,
    ClassroomDeleteResponse,
    ClassroomDetailResponse,
    ClassroomResponse,
    ClassroomUpdateRequest,
)
from schoolhub.models.common import PageRequest, PaginatedResponse, PaginationMeta

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = frozenset({"name", "capacity", "resources"})


class ClassroomServiceError(ServiceError):
    """Base exception for classroom service errors."""

    pass


class ClassroomNotFoundError(ClassroomServiceError):
    """Raised when a classroom is not found."""

    kind = ErrorKind.NOT_FOUND
    default_message = "Classroom not found"


class SchoolIdRequiredError(ClassroomServiceError):
    """Raised when a superadmin creates a scoped record without a school."""

    kind = ErrorKind.VALIDATION_FAILED
    default_message = "School ID is required for superadmin"


class SchoolInactiveError(ClassroomServiceError):
    kind = ErrorKind.INVALID_STATE
    default_message = "Cannot create classroom in an inactive school"


class ClassroomNameExistsError(ClassroomServiceError):
    """Raised when the school already has an active classroom with the name."""

    kind = ErrorKind.CONFLICT_DUPLICATE
    default_message = "A classroom with this name already exists in this school"


class ClassroomAlreadyInactiveError(ClassroomServiceError):
    kind = ErrorKind.INVALID_STATE
    default_message = "Classroom is already inactive"


class ClassroomFullError(ClassroomServiceError):
    """Raised when a classroom has no free seat left."""

    kind = ErrorKind.CAPACITY_EXCEEDED
    default_message = "Classroom is at full capacity"


class CapacityBelowEnrollmentError(ClassroomServiceError):
    """Raised when a capacity reduction would leave students without a seat."""

    kind = ErrorKind.CAPACITY_EXCEEDED
    default_message = "Cannot reduce capacity below current student count"


class ClassroomHasActiveStudentsError(ClassroomServiceError):
    kind = ErrorKind.INVALID_STATE
    default_message = (
        "Cannot delete classroom with active students. "
        "Please transfer or remove students first."
    )


class ClassroomService:
    """Service for managing classrooms.

    Any authenticated actor may call it. Superadmins work across schools;
    school admins are confined to their own school.

    Attributes:
        _db: Async database session.
        _schools: School lookups for reference checks.
        _pagination: Page size bounds for listings.
        _strict_capacity: Lock the classroom row before counting seats.
    """

    def __init__(
        self,
        db: AsyncSession,
        pagination: PaginationSettings | None = None,
        strict_capacity: bool = False,
        school_service: SchoolService | None = None,
    ) -> None:
        """Initialize the classroom service.

        Args:
            db: Async database session.
            pagination: Page size bounds.
            strict_capacity: Serialize seat checks with SELECT ... FOR UPDATE.
            school_service: School service sharing the same session.
        """
        self._db = db
        self._pagination = pagination or PaginationSettings()
        self._strict_capacity = strict_capacity
        self._schools = school_service or SchoolService(db, self._pagination)

    async def create_classroom(
        self,
        request: ClassroomCreateRequest,
        actor: Actor | None,
    ) -> ClassroomResponse:
        """Create a new classroom.

        School admins may omit school_id; it resolves to their own school.
        Superadmins must name the school.

        Raises:
            SchoolAccessDeniedError: If a school admin names a foreign school.
            SchoolIdRequiredError: If a superadmin omits the school.
            SchoolNotFoundError: If the school does not exist.
            SchoolInactiveError: If the school is inactive.
            ClassroomNameExistsError: If the name is taken in that school.
        """
        actor = require_actor(actor)
        school_id = resolve_effective_school(actor, request.school_id)
        if not school_id:
            raise SchoolIdRequiredError()

        school = await self._schools.find_by_id(school_id)
        if not school:
            raise SchoolNotFoundError()
        if not school.is_active:
            raise SchoolInactiveError()

        await self._ensure_unique_name(school_id, request.name, request.academic_year)

        classroom = Classroom(
            name=request.name,
            school_id=school_id,
            capacity=request.capacity,
            grade=request.grade,
            section=request.section,
            resources=list(request.resources),
            academic_year=request.academic_year,
            status=LifecycleStatus.ACTIVE,
            created_by=actor.user_id,
        )

        self._db.add(classroom)
        await self._db.commit()
        await self._db.refresh(classroom)

        logger.info(
            "Classroom created: %s (name=%s, school=%s) by %s",
            classroom.id,
            classroom.name,
            school_id,
            actor.user_id,
        )

        return await self._to_response(classroom)

    async def list_classrooms(
        self,
        actor: Actor | None,
        school_id: str | None = None,
        search: str | None = None,
        grade: str | None = None,
        academic_year: str | None = None,
        is_active: bool | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> PaginatedResponse[ClassroomResponse]:
        """List classrooms newest first, each with live seat counts.

        School admins always see only their own school; a school_id filter
        from them is ignored.
        """
        actor = require_actor(actor)
        paging = PageRequest.clamp(
            page, limit, self._pagination.default_limit, self._pagination.max_limit
        )

        stmt = select(Classroom)
        scope = listing_scope(actor, school_id)
        if scope:
            stmt = stmt.where(Classroom.school_id == scope)
        if is_active is not None:
            stmt = stmt.where(Classroom.status == LifecycleStatus.from_flag(is_active))
        if search:
            stmt = stmt.where(Classroom.name.ilike(f"%{search}%"))
        if grade:
            stmt = stmt.where(Classroom.grade == grade)
        if academic_year:
            stmt = stmt.where(Classroom.academic_year == academic_year)

        count_result = await self._db.execute(select(func.count()).select_from(stmt.subquery()))
        total = count_result.scalar() or 0

        stmt = stmt.order_by(Classroom.created_at.desc(), Classroom.id.desc())
        stmt = stmt.offset(paging.offset).limit(paging.limit)
        result = await self._db.execute(stmt)
        classrooms = result.scalars().all()

        items = [await self._to_response(classroom) for classroom in classrooms]
        return PaginatedResponse[ClassroomResponse](
            items=items,
            pagination=PaginationMeta.build(paging.page, paging.limit, total),
        )

    async def get_classroom(
        self,
        classroom_id: str,
        actor: Actor | None,
    ) -> ClassroomDetailResponse:
        """Get a classroom with seat counts and the school name.

        Raises:
            ClassroomNotFoundError: If classroom not found.
            SchoolAccessDeniedError: If it belongs to another school.
        """
        actor = require_actor(actor)
        classroom = await self._get_accessible(classroom_id, actor)

        school = await self._schools.find_by_id(classroom.school_id)
        response = await self._to_response(classroom)
        return ClassroomDetailResponse(
            **response.model_dump(),
            school_name=school.name if school else None,
        )

    async def update_classroom(
        self,
        classroom_id: str,
        request: ClassroomUpdateRequest,
        actor: Actor | None,
    ) -> ClassroomResponse:
        """Update a classroom.

        Raises:
            ClassroomNotFoundError: If classroom not found.
            SchoolAccessDeniedError: If it belongs to another school.
            CapacityBelowEnrollmentError: If the new capacity is below the
                active student count.
            ClassroomNameExistsError: If the new name is taken.
            ClassroomHasActiveStudentsError: If deactivating with active students.
            SchoolInactiveError: If reactivating under an inactive school.
        """
        actor = require_actor(actor)
        classroom = await self._get_accessible(classroom_id, actor)

        updates = request.model_dump(exclude_unset=True)
        is_active = updates.pop("is_active", None)

        new_capacity = updates.get("capacity")
        if new_capacity is not None and new_capacity < classroom.capacity:
            current = await self.count_active_students(classroom.id)
            if current > new_capacity:
                raise CapacityBelowEnrollmentError(
                    f"Cannot reduce capacity below current student count ({current})",
                    details={"studentCount": current},
                )

        new_name = updates.get("name")
        if new_name and new_name != classroom.name:
            # Either side's academic year narrows the duplicate check
            year = updates.get("academic_year") or classroom.academic_year
            await self._ensure_unique_name(
                classroom.school_id, new_name, year, exclude_id=classroom.id
            )

        reactivating = is_active is True and not classroom.is_active
        if reactivating:
            school = await self._schools.find_by_id(classroom.school_id)
            if not school or not school.is_active:
                raise SchoolInactiveError("Cannot reactivate classroom in an inactive school")
            await self._ensure_unique_name(
                classroom.school_id,
                updates.get("name") or classroom.name,
                updates.get("academic_year", classroom.academic_year),
                exclude_id=classroom.id,
            )

        for field, value in updates.items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(classroom, field, value)

        if is_active is False and classroom.is_active:
            await self._deactivate(classroom)
        elif reactivating:
            classroom.activate()

        await self._db.commit()
        await self._db.refresh(classroom)

        logger.info("Classroom updated: %s by %s", classroom.id, actor.user_id)

        return await self._to_response(classroom)

    async def delete_classroom(
        self,
        classroom_id: str,
        actor: Actor | None,
    ) -> ClassroomDeleteResponse:
        """Deactivate a classroom (soft delete).

        Never cascades to students: fails while any active student sits in it.

        Raises:
            ClassroomNotFoundError: If classroom not found.
            SchoolAccessDeniedError: If it belongs to another school.
            ClassroomAlreadyInactiveError: If already inactive.
            ClassroomHasActiveStudentsError: If active students remain.
        """
        actor = require_actor(actor)
        classroom = await self._get_accessible(classroom_id, actor)
        if not classroom.is_active:
            raise ClassroomAlreadyInactiveError()

        await self._deactivate(classroom)
        await self._db.commit()
        await self._db.refresh(classroom)

        logger.info("Classroom deactivated: %s by %s", classroom.id, actor.user_id)

        return ClassroomDeleteResponse(
            message="Classroom deleted successfully",
            classroom=await self._to_response(classroom),
        )

    # =========================================================================
    # Seat accounting (shared with StudentService)
    # =========================================================================

    async def find_by_id(self, classroom_id: str | None) -> Classroom | None:
        """Look up a classroom without any access check."""
        if not classroom_id:
            return None
        return await self._db.get(Classroom, classroom_id)

    async def count_active_students(
        self,
        classroom_id: str,
        exclude_student_id: str | None = None,
    ) -> int:
        """Count active students seated in a classroom.

        Args:
            classroom_id: Classroom identifier.
            exclude_student_id: Student not to count (the one being moved).
        """
        stmt = (
            select(func.count())
            .select_from(Student)
            .where(
                Student.classroom_id == classroom_id,
                Student.status == LifecycleStatus.ACTIVE,
            )
        )
        if exclude_student_id:
            stmt = stmt.where(Student.id != exclude_student_id)
        result = await self._db.execute(stmt)
        return result.scalar() or 0

    async def ensure_has_seat(
        self,
        classroom: Classroom,
        message: str | None = None,
        exclude_student_id: str | None = None,
    ) -> None:
        """Raise ClassroomFullError unless the classroom has a free seat.

        With strict capacity enabled the classroom row is locked first, so
        concurrent seat checks for the same classroom run one at a time
        until the surrounding transaction ends.
        """
        if self._strict_capacity:
            await self._db.execute(
                select(Classroom.id).where(Classroom.id == classroom.id).with_for_update()
            )

        occupied = await self.count_active_students(classroom.id, exclude_student_id)
        if occupied >= classroom.capacity:
            raise ClassroomFullError(
                message,
                details={"capacity": classroom.capacity, "studentCount": occupied},
            )

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _get_accessible(self, classroom_id: str, actor: Actor) -> Classroom:
        classroom = await self.find_by_id(classroom_id)
        if not classroom:
            raise ClassroomNotFoundError()
        check_school_access(actor, classroom.school_id)
        return classroom

    async def _ensure_unique_name(
        self,
        school_id: str,
        name: str,
        academic_year: str | None,
        exclude_id: str | None = None,
    ) -> None:
        """Reject a name already used by an active classroom of the school.

        The academic year only narrows the check when one is known.
        """
        stmt = select(Classroom.id).where(
            Classroom.school_id == school_id,
            func.lower(Classroom.name) == name.lower(),
            Classroom.status == LifecycleStatus.ACTIVE,
        )
        if academic_year:
            stmt = stmt.where(Classroom.academic_year == academic_year)
        if exclude_id:
            stmt = stmt.where(Classroom.id != exclude_id)

        result = await self._db.execute(stmt.limit(1))
        if result.scalar_one_or_none() is not None:
            message = ClassroomNameExistsError.default_message
            if academic_year:
                message += " for the same academic year"
            raise ClassroomNameExistsError(message)

    async def _deactivate(self, classroom: Classroom) -> None:
        counts = await count_blocking_dependents(self._db, "classroom", classroom.id)
        if is_blocked(counts):
            raise ClassroomHasActiveStudentsError(details=counts)
        apply_detach_rules("classroom", classroom)
        classroom.deactivate()

    async def _to_response(self, classroom: Classroom) -> ClassroomResponse:
        student_count = await self.count_active_students(classroom.id)
        return ClassroomResponse(
            id=classroom.id,
            name=classroom.name,
            school_id=classroom.school_id,
            capacity=classroom.capacity,
            grade=classroom.grade,
            section=classroom.section,
            resources=list(classroom.resources or []),
            academic_year=classroom.academic_year,
            is_active=classroom.is_active,
            created_by=classroom.created_by,
            created_at=classroom.created_at,
            updated_at=classroom.updated_at,
            student_count=student_count,
            available_seats=classroom.capacity - student_count,
        )
