# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student enrollment API endpoints.

- POST / - Enroll a student
- GET / - List students
- GET /{student_id} - Get student with transfer history
- PUT /{student_id} - Update student
- DELETE /{student_id} - Unenroll student (soft delete, leaves the classroom)
- POST /{student_id}/transfer - Move a student to another school or classroom

Example:
    POST /api/v1/students/65f1c0ffee0000000000abcd/transfer
    {
        "toClassroomId": "65f1c0ffee0000000000beef",
        "reason": "Parent request"
    }
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from schoolhub.api.dependencies import CurrentActor, Students
from schoolhub.models.common import OBJECT_ID_PATTERN, Gender, PaginatedResponse
from schoolhub.models.student import (
    StudentCreateRequest,
    StudentDeleteResponse,
    StudentDetailResponse,
    StudentResponse,
    StudentUpdateRequest,
    TransferRequest,
    TransferResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

StudentId = Annotated[str, Path(pattern=OBJECT_ID_PATTERN, description="Student ID")]


@router.post(
    "",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll student",
)
async def enroll_student(
    data: StudentCreateRequest,
    actor: CurrentActor,
    service: Students,
) -> StudentResponse:
    return await service.enroll_student(data, actor)


@router.get(
    "",
    response_model=PaginatedResponse[StudentResponse],
    summary="List students",
)
async def list_students(
    actor: CurrentActor,
    service: Students,
    school_id: Annotated[str | None, Query(alias="schoolId")] = None,
    classroom_id: Annotated[str | None, Query(alias="classroomId")] = None,
    search: Annotated[str | None, Query(description="First name, last name or email")] = None,
    gender: Annotated[Gender | None, Query()] = None,
    is_active: Annotated[bool | None, Query(alias="isActive")] = None,
    page: Annotated[int | None, Query()] = None,
    limit: Annotated[int | None, Query()] = None,
) -> PaginatedResponse[StudentResponse]:
    return await service.list_students(
        actor,
        school_id=school_id,
        classroom_id=classroom_id,
        search=search,
        gender=gender.value if gender else None,
        is_active=is_active,
        page=page,
        limit=limit,
    )


@router.get(
    "/{student_id}",
    response_model=StudentDetailResponse,
    summary="Get student",
)
async def get_student(
    student_id: StudentId,
    actor: CurrentActor,
    service: Students,
) -> StudentDetailResponse:
    return await service.get_student(student_id, actor)


@router.put(
    "/{student_id}",
    response_model=StudentResponse,
    summary="Update student",
)
async def update_student(
    student_id: StudentId,
    data: StudentUpdateRequest,
    actor: CurrentActor,
    service: Students,
) -> StudentResponse:
    return await service.update_student(student_id, data, actor)


@router.delete(
    "/{student_id}",
    response_model=StudentDeleteResponse,
    summary="Unenroll student",
)
async def delete_student(
    student_id: StudentId,
    actor: CurrentActor,
    service: Students,
) -> StudentDeleteResponse:
    return await service.delete_student(student_id, actor)


@router.post(
    "/{student_id}/transfer",
    response_model=TransferResponse,
    summary="Transfer student",
    description=(
        "Move a student to another classroom and/or school. "
        "Cross-school transfers require a superadmin."
    ),
)
async def transfer_student(
    student_id: StudentId,
    data: TransferRequest,
    actor: CurrentActor,
    service: Students,
) -> TransferResponse:
    return await service.transfer_student(student_id, data, actor)
