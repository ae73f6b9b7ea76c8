# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student service for enrollment and transfers.

This module provides the StudentService that handles:
- Enrollment into a school and, optionally, a classroom with a free seat
- Student reads, listing and partial updates scoped to the actor's school
- Unenrollment (soft delete), which also frees the classroom seat
- Transfers between classrooms and, for superadmins, between schools

A student's classroom, when set, always belongs to the student's school.
Every write path below checks that before touching the row.

Example:
    >>> student_service = StudentService(db_session)
    >>> student = await student_service.enroll_student(request, actor)
    >>> result = await student_service.transfer_student(
    ...     student.id, TransferRequest(to_school_id=other_school_id), superadmin
    ... )
"""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.config.settings import PaginationSettings
from schoolhub.domains.access.policy import (
    Actor,
    check_school_access,
    listing_scope,
    require_actor,
    resolve_effective_school,
)
from schoolhub.domains.cascade import apply_detach_rules
from schoolhub.domains.classroom.service import (
    ClassroomNotFoundError,
    ClassroomService,
    SchoolIdRequiredError,
)
from schoolhub.domains.errors import ErrorKind, ServiceError
from schoolhub.domains.school.service import SchoolNotFoundError, SchoolService
from schoolhub.infrastructure.database.models import (
    Classroom,
    LifecycleStatus,
    School,
    Student,
    StudentTransfer,
)
from schoolhub.models.common import PageRequest, PaginatedResponse, PaginationMeta
from schoolhub.models.student import (
    PlacementSummary,
    StudentCreateRequest,
    StudentDeleteResponse,
    StudentDetailResponse,
    StudentResponse,
    StudentUpdateRequest,
    TransferRecordResponse,
    TransferRequest,
    TransferResponse,
    TransferSummary,
)
from schoolhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)

STUDENT_ACCESS_MESSAGE = "Access denied. You can only access students in your assigned school."

REQUIRED_FIELDS = frozenset({"first_name", "last_name"})


class StudentServiceError(ServiceError):
    """Base exception for student service errors."""

    pass


class StudentNotFoundError(StudentServiceError):
    """Raised when a student is not found."""

    kind = ErrorKind.NOT_FOUND
    default_message = "Student not found"


class StudentEmailExistsError(StudentServiceError):
    kind = ErrorKind.CONFLICT_DUPLICATE
    default_message = "A student with this email already exists"


class PlacementInactiveError(StudentServiceError):
    """Raised when the target school or classroom is inactive."""

    kind = ErrorKind.INVALID_STATE
    default_message = "Target is inactive"


class ClassroomSchoolMismatchError(StudentServiceError):
    """Raised when a classroom does not belong to the student's school."""

    kind = ErrorKind.INVALID_STATE
    default_message = "Classroom does not belong to the specified school"


class StudentAlreadyInactiveError(StudentServiceError):
    kind = ErrorKind.INVALID_STATE
    default_message = "Student is already unenrolled"


class StudentInactiveError(StudentServiceError):
    """Raised when placing a student who is no longer enrolled."""

    kind = ErrorKind.INVALID_STATE
    default_message = "Cannot transfer an inactive student"


class TransferTargetRequiredError(StudentServiceError):
    kind = ErrorKind.VALIDATION_FAILED
    default_message = "At least one of toSchoolId or toClassroomId is required"


class CrossSchoolTransferForbiddenError(StudentServiceError):
    """Raised when a school admin tries to move a student to another school."""

    kind = ErrorKind.FORBIDDEN
    default_message = "Only superadmins can transfer students between schools"


class TransferTargetNotFoundError(StudentServiceError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Target not found"


class StudentService:
    """Service for student enrollment, updates and transfers.

    Any authenticated actor may call it. School admins only see and change
    students of their own school and may not move students out of it.

    Attributes:
        _db: Async database session.
        _schools: School lookups.
        _classrooms: Classroom lookups and seat accounting.
        _pagination: Page size bounds for listings.
    """

    def __init__(
        self,
        db: AsyncSession,
        pagination: PaginationSettings | None = None,
        strict_capacity: bool = False,
    ) -> None:
        """Initialize the student service.

        Args:
            db: Async database session.
            pagination: Page size bounds.
            strict_capacity: Serialize seat checks with SELECT ... FOR UPDATE.
        """
        self._db = db
        self._pagination = pagination or PaginationSettings()
        self._schools = SchoolService(db, self._pagination)
        self._classrooms = ClassroomService(
            db,
            self._pagination,
            strict_capacity=strict_capacity,
            school_service=self._schools,
        )

    async def enroll_student(
        self,
        request: StudentCreateRequest,
        actor: Actor | None,
    ) -> StudentResponse:
        """Enroll a new student.

        Args:
            request: Enrollment request.
            actor: Acting user.

        Returns:
            The enrolled student.

        Raises:
            SchoolAccessDeniedError: If a school admin names a foreign school.
            SchoolIdRequiredError: If a superadmin omits the school.
            SchoolNotFoundError: If the school does not exist.
            PlacementInactiveError: If the school or classroom is inactive.
            ClassroomNotFoundError: If the classroom does not exist.
            ClassroomSchoolMismatchError: If the classroom is in another school.
            ClassroomFullError: If the classroom has no free seat.
            StudentEmailExistsError: If another student uses the email.
        """
        actor = require_actor(actor)
        school_id = resolve_effective_school(actor, request.school_id, STUDENT_ACCESS_MESSAGE)
        if not school_id:
            raise SchoolIdRequiredError()

        school = await self._schools.find_by_id(school_id)
        if not school:
            raise SchoolNotFoundError()
        if not school.is_active:
            raise PlacementInactiveError("Cannot enroll student in an inactive school")

        if request.classroom_id:
            classroom = await self._classrooms.find_by_id(request.classroom_id)
            if not classroom:
                raise ClassroomNotFoundError()
            if not classroom.is_active:
                raise PlacementInactiveError("Cannot enroll student in an inactive classroom")
            if classroom.school_id != school_id:
                raise ClassroomSchoolMismatchError()
            await self._classrooms.ensure_has_seat(classroom, "Classroom is at full capacity")

        if request.email:
            await self._ensure_unique_email(request.email)

        student = Student(
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            date_of_birth=request.date_of_birth,
            gender=request.gender.value if request.gender else None,
            school_id=school_id,
            classroom_id=request.classroom_id,
            enrollment_date=utc_now(),
            guardian_name=request.guardian_name,
            guardian_phone=request.guardian_phone,
            guardian_email=request.guardian_email,
            address=request.address,
            status=LifecycleStatus.ACTIVE,
            created_by=actor.user_id,
        )

        self._db.add(student)
        await self._db.commit()
        await self._db.refresh(student)

        logger.info(
            "Student enrolled: %s (school=%s, classroom=%s) by %s",
            student.id,
            student.school_id,
            student.classroom_id,
            actor.user_id,
        )

        return self._to_response(student)

    async def list_students(
        self,
        actor: Actor | None,
        school_id: str | None = None,
        classroom_id: str | None = None,
        search: str | None = None,
        gender: str | None = None,
        is_active: bool | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> PaginatedResponse[StudentResponse]:
        """List students newest first.

        Args:
            actor: Acting user.
            school_id: School filter, ignored for school admins.
            classroom_id: Classroom filter.
            search: Case-insensitive substring of first name, last name or email.
            gender: Gender filter.
            is_active: Lifecycle filter.
            page: Page number, clamped to at least 1.
            limit: Page size, clamped to the configured bounds.
        """
        actor = require_actor(actor)
        paging = PageRequest.clamp(
            page, limit, self._pagination.default_limit, self._pagination.max_limit
        )

        stmt = select(Student)
        scope = listing_scope(actor, school_id)
        if scope:
            stmt = stmt.where(Student.school_id == scope)
        if classroom_id:
            stmt = stmt.where(Student.classroom_id == classroom_id)
        if is_active is not None:
            stmt = stmt.where(Student.status == LifecycleStatus.from_flag(is_active))
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    Student.first_name.ilike(pattern),
                    Student.last_name.ilike(pattern),
                    Student.email.ilike(pattern),
                )
            )
        if gender:
            stmt = stmt.where(Student.gender == gender)

        count_result = await self._db.execute(select(func.count()).select_from(stmt.subquery()))
        total = count_result.scalar() or 0

        stmt = stmt.order_by(Student.created_at.desc(), Student.id.desc())
        stmt = stmt.offset(paging.offset).limit(paging.limit)
        result = await self._db.execute(stmt)
        students = result.scalars().all()

        return PaginatedResponse[StudentResponse](
            items=[self._to_response(student) for student in students],
            pagination=PaginationMeta.build(paging.page, paging.limit, total),
        )

    async def get_student(self, student_id: str, actor: Actor | None) -> StudentDetailResponse:
        """Get a student with school, classroom and transfer history names resolved.

        Raises:
            StudentNotFoundError: If student not found.
            SchoolAccessDeniedError: If the student belongs to another school.
        """
        actor = require_actor(actor)
        student = await self._get_accessible(student_id, actor)
        return await self._to_detail(student)

    async def update_student(
        self,
        student_id: str,
        request: StudentUpdateRequest,
        actor: Actor | None,
    ) -> StudentResponse:
        """Update a student.

        A new classroom must belong to the student's current school and
        have a free seat; moving to another school goes through
        transfer_student. Setting ``is_active`` to False behaves like
        delete_student and frees the seat. Reactivating requires an active
        school and, when the student keeps a classroom, an active classroom
        with a free seat.

        Raises:
            StudentNotFoundError: If student not found.
            SchoolAccessDeniedError: If the student belongs to another school.
            StudentEmailExistsError: If the new email is taken.
            ClassroomNotFoundError: If the new classroom does not exist.
            PlacementInactiveError: If the new classroom is inactive, or the
                school or kept classroom is inactive on reactivation.
            ClassroomSchoolMismatchError: If the new classroom is in another school.
            StudentInactiveError: If a classroom is given to an unenrolled student.
            ClassroomFullError: If the new classroom has no free seat, or the
                kept one is full on reactivation.
        """
        actor = require_actor(actor)
        student = await self._get_accessible(student_id, actor)

        updates = request.model_dump(exclude_unset=True)
        is_active = updates.pop("is_active", None)
        reactivating = is_active is True and not student.is_active
        ends_active = student.is_active if is_active is None else is_active

        new_email = updates.get("email")
        if new_email and new_email != student.email:
            await self._ensure_unique_email(new_email, exclude_id=student.id)

        new_classroom_id = updates.get("classroom_id")
        if new_classroom_id and new_classroom_id != student.classroom_id:
            if not ends_active:
                raise StudentInactiveError("Cannot assign a classroom to an unenrolled student")
            classroom = await self._classrooms.find_by_id(new_classroom_id)
            if not classroom:
                raise ClassroomNotFoundError()
            if not classroom.is_active:
                raise PlacementInactiveError("Cannot move student to an inactive classroom")
            if classroom.school_id != student.school_id:
                raise ClassroomSchoolMismatchError(
                    "Use transferStudent to move student to a different school's classroom"
                )
            await self._classrooms.ensure_has_seat(
                classroom,
                "Target classroom is at full capacity",
                exclude_student_id=student.id,
            )

        if reactivating:
            seat_id = updates["classroom_id"] if "classroom_id" in updates else student.classroom_id
            await self._ensure_placement_active(student, seat_id)

        if "gender" in updates and updates["gender"] is not None:
            updates["gender"] = updates["gender"].value

        for field, value in updates.items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(student, field, value)

        if is_active is False and student.is_active:
            self._deactivate(student)
        elif reactivating:
            student.activate()

        await self._db.commit()
        await self._db.refresh(student)

        logger.info("Student updated: %s by %s", student.id, actor.user_id)

        return self._to_response(student)

    async def delete_student(self, student_id: str, actor: Actor | None) -> StudentDeleteResponse:
        """Unenroll a student (soft delete) and free the classroom seat.

        Raises:
            StudentNotFoundError: If student not found.
            SchoolAccessDeniedError: If the student belongs to another school.
            StudentAlreadyInactiveError: If already unenrolled.
        """
        actor = require_actor(actor)
        student = await self._get_accessible(student_id, actor)
        if not student.is_active:
            raise StudentAlreadyInactiveError()

        self._deactivate(student)
        await self._db.commit()
        await self._db.refresh(student)

        logger.info("Student unenrolled: %s by %s", student.id, actor.user_id)

        return StudentDeleteResponse(
            message="Student unenrolled successfully",
            student=self._to_response(student),
        )

    async def transfer_student(
        self,
        student_id: str,
        request: TransferRequest,
        actor: Actor | None,
    ) -> TransferResponse:
        """Move a student to another classroom and/or school.

        All checks run before anything is written. When they pass, the
        placement change and the new transfer history entry are committed
        together. The classroom is always set explicitly: moving to a new
        school without naming a classroom leaves the student unassigned.

        Args:
            student_id: Student to move.
            request: Target school and/or classroom plus an optional reason.
            actor: Acting user.

        Returns:
            The updated student and a before/after summary with names.

        Raises:
            StudentNotFoundError: If student not found.
            StudentInactiveError: If the student is unenrolled.
            TransferTargetRequiredError: If neither target is given.
            SchoolAccessDeniedError: If the actor cannot manage the source school.
            CrossSchoolTransferForbiddenError: If a school admin changes school.
            TransferTargetNotFoundError: If a target does not exist.
            PlacementInactiveError: If a target is inactive.
            ClassroomSchoolMismatchError: If the classroom is not in the target school.
            ClassroomFullError: If the target classroom has no free seat.
        """
        actor = require_actor(actor)

        student = await self._db.get(Student, student_id)
        if not student:
            raise StudentNotFoundError()
        if not student.is_active:
            raise StudentInactiveError()

        to_school_id = request.to_school_id
        to_classroom_id = request.to_classroom_id
        if not to_school_id and not to_classroom_id:
            raise TransferTargetRequiredError()

        from_school_id = student.school_id
        from_classroom_id = student.classroom_id

        check_school_access(actor, from_school_id, STUDENT_ACCESS_MESSAGE)

        is_cross_school = bool(to_school_id) and to_school_id != from_school_id
        if is_cross_school and not actor.is_superadmin:
            raise CrossSchoolTransferForbiddenError()

        target_school_id = to_school_id or from_school_id

        if to_school_id:
            target_school = await self._schools.find_by_id(to_school_id)
            if not target_school:
                raise TransferTargetNotFoundError("Target school not found")
            if not target_school.is_active:
                raise PlacementInactiveError("Cannot transfer student to an inactive school")

        if to_classroom_id:
            target_classroom = await self._classrooms.find_by_id(to_classroom_id)
            if not target_classroom:
                raise TransferTargetNotFoundError("Target classroom not found")
            if not target_classroom.is_active:
                raise PlacementInactiveError("Cannot transfer student to an inactive classroom")
            if target_classroom.school_id != target_school_id:
                raise ClassroomSchoolMismatchError(
                    "Target classroom does not belong to the target school"
                )
            await self._classrooms.ensure_has_seat(
                target_classroom,
                "Target classroom is at full capacity",
                exclude_student_id=student.id,
            )

        record = StudentTransfer(
            student_id=student.id,
            sequence=await self._next_transfer_sequence(student.id),
            from_school_id=from_school_id,
            to_school_id=target_school_id,
            from_classroom_id=from_classroom_id,
            to_classroom_id=to_classroom_id,
            date=utc_now(),
            reason=request.reason or "",
        )

        student.school_id = target_school_id
        student.classroom_id = to_classroom_id
        self._db.add(record)

        await self._db.commit()
        await self._db.refresh(student)

        logger.info(
            "Student transferred: %s (school %s -> %s, classroom %s -> %s) by %s",
            student.id,
            from_school_id,
            target_school_id,
            from_classroom_id,
            to_classroom_id,
            actor.user_id,
        )

        names = await self._resolve_names(
            [from_school_id, target_school_id],
            [from_classroom_id, to_classroom_id],
        )
        return TransferResponse(
            message="Student transferred successfully",
            student=await self._to_detail(student),
            transfer=TransferSummary(
                from_=PlacementSummary(
                    school=names.get(from_school_id),
                    classroom=names.get(from_classroom_id) if from_classroom_id else None,
                ),
                to=PlacementSummary(
                    school=names.get(target_school_id),
                    classroom=names.get(to_classroom_id) if to_classroom_id else None,
                ),
            ),
        )

    async def get_transfer_history(self, student_id: str) -> list[StudentTransfer]:
        """Return a student's transfer records, oldest first."""
        result = await self._db.execute(
            select(StudentTransfer)
            .where(StudentTransfer.student_id == student_id)
            .order_by(StudentTransfer.sequence.asc())
        )
        return list(result.scalars().all())

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _get_accessible(self, student_id: str, actor: Actor) -> Student:
        student = await self._db.get(Student, student_id)
        if not student:
            raise StudentNotFoundError()
        check_school_access(actor, student.school_id, STUDENT_ACCESS_MESSAGE)
        return student

    async def _ensure_unique_email(self, email: str, exclude_id: str | None = None) -> None:
        """Reject an email used by any other student, active or not."""
        stmt = select(Student.id).where(func.lower(Student.email) == email.lower())
        if exclude_id:
            stmt = stmt.where(Student.id != exclude_id)
        result = await self._db.execute(stmt.limit(1))
        if result.scalar_one_or_none() is not None:
            raise StudentEmailExistsError()

    async def _ensure_placement_active(self, student: Student, classroom_id: str | None) -> None:
        """Check that a student being re-enrolled lands on an active placement."""
        school = await self._schools.find_by_id(student.school_id)
        if not school or not school.is_active:
            raise PlacementInactiveError("Cannot reactivate student in an inactive school")
        if not classroom_id:
            return
        classroom = await self._classrooms.find_by_id(classroom_id)
        if not classroom or not classroom.is_active:
            raise PlacementInactiveError("Cannot reactivate student in an inactive classroom")
        await self._classrooms.ensure_has_seat(
            classroom, "Classroom is at full capacity", exclude_student_id=student.id
        )

    @staticmethod
    def _deactivate(student: Student) -> None:
        apply_detach_rules("student", student)
        student.deactivate()

    async def _next_transfer_sequence(self, student_id: str) -> int:
        result = await self._db.execute(
            select(func.coalesce(func.max(StudentTransfer.sequence), 0)).where(
                StudentTransfer.student_id == student_id
            )
        )
        return (result.scalar() or 0) + 1

    async def _resolve_names(
        self,
        school_ids: list[str | None],
        classroom_ids: list[str | None],
    ) -> dict[str, str]:
        """Map school and classroom ids to their names in two queries."""
        names: dict[str, str] = {}
        wanted_schools = {sid for sid in school_ids if sid}
        wanted_classrooms = {cid for cid in classroom_ids if cid}

        if wanted_schools:
            result = await self._db.execute(
                select(School.id, School.name).where(School.id.in_(wanted_schools))
            )
            names.update({row.id: row.name for row in result})
        if wanted_classrooms:
            result = await self._db.execute(
                select(Classroom.id, Classroom.name).where(Classroom.id.in_(wanted_classrooms))
            )
            names.update({row.id: row.name for row in result})
        return names

    @staticmethod
    def _to_response(student: Student) -> StudentResponse:
        return StudentResponse.model_validate(student)

    async def _to_detail(self, student: Student) -> StudentDetailResponse:
        history = await self.get_transfer_history(student.id)
        school_ids = [student.school_id]
        classroom_ids = [student.classroom_id]
        for record in history:
            school_ids += [record.from_school_id, record.to_school_id]
            classroom_ids += [record.from_classroom_id, record.to_classroom_id]
        names = await self._resolve_names(school_ids, classroom_ids)

        return StudentDetailResponse(
            **self._to_response(student).model_dump(),
            school_name=names.get(student.school_id),
            classroom_name=names.get(student.classroom_id) if student.classroom_id else None,
            transfer_history=[
                TransferRecordResponse(
                    from_school=record.from_school_id,
                    to_school=record.to_school_id,
                    from_classroom=record.from_classroom_id,
                    to_classroom=record.to_classroom_id,
                    date=record.date,
                    reason=record.reason,
                    from_school_name=names.get(record.from_school_id),
                    to_school_name=names.get(record.to_school_id),
                    from_classroom_name=(
                        names.get(record.from_classroom_id) if record.from_classroom_id else None
                    ),
                    to_classroom_name=(
                        names.get(record.to_classroom_id) if record.to_classroom_id else None
                    ),
                )
                for record in history
            ],
        )
