# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Classroom management API endpoints.

- POST / - Create a classroom (school admins: always in their own school)
- GET / - List classrooms with seat counts
- GET /{classroom_id} - Get classroom details
- PUT /{classroom_id} - Update classroom
- DELETE /{classroom_id} - Deactivate classroom (soft delete)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from schoolhub.api.dependencies import Classrooms, CurrentActor
from schoolhub.models.classroom import (
    ClassroomCreateRequest,
    ClassroomDeleteResponse,
    ClassroomDetailResponse,
    ClassroomResponse,
    ClassroomUpdateRequest,
)
from schoolhub.models.common import OBJECT_ID_PATTERN, PaginatedResponse

logger = logging.getLogger(__name__)

router = APIRouter()

ClassroomId = Annotated[str, Path(pattern=OBJECT_ID_PATTERN, description="Classroom ID")]


@router.post(
    "",
    response_model=ClassroomResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create classroom",
)
async def create_classroom(
    data: ClassroomCreateRequest,
    actor: CurrentActor,
    service: Classrooms,
) -> ClassroomResponse:
    return await service.create_classroom(data, actor)


@router.get(
    "",
    response_model=PaginatedResponse[ClassroomResponse],
    summary="List classrooms",
)
async def list_classrooms(
    actor: CurrentActor,
    service: Classrooms,
    school_id: Annotated[str | None, Query(alias="schoolId")] = None,
    search: Annotated[str | None, Query(description="Name substring")] = None,
    grade: Annotated[str | None, Query()] = None,
    academic_year: Annotated[str | None, Query(alias="academicYear")] = None,
    is_active: Annotated[bool | None, Query(alias="isActive")] = None,
    page: Annotated[int | None, Query()] = None,
    limit: Annotated[int | None, Query()] = None,
) -> PaginatedResponse[ClassroomResponse]:
    """List classrooms newest first.

    ``schoolId`` only narrows the listing for superadmins; school admins
    always see their own school.
    """
    return await service.list_classrooms(
        actor,
        school_id=school_id,
        search=search,
        grade=grade,
        academic_year=academic_year,
        is_active=is_active,
        page=page,
        limit=limit,
    )


@router.get(
    "/{classroom_id}",
    response_model=ClassroomDetailResponse,
    summary="Get classroom",
)
async def get_classroom(
    classroom_id: ClassroomId,
    actor: CurrentActor,
    service: Classrooms,
) -> ClassroomDetailResponse:
    return await service.get_classroom(classroom_id, actor)


@router.put(
    "/{classroom_id}",
    response_model=ClassroomResponse,
    summary="Update classroom",
)
async def update_classroom(
    classroom_id: ClassroomId,
    data: ClassroomUpdateRequest,
    actor: CurrentActor,
    service: Classrooms,
) -> ClassroomResponse:
    return await service.update_classroom(classroom_id, data, actor)


@router.delete(
    "/{classroom_id}",
    response_model=ClassroomDeleteResponse,
    summary="Deactivate classroom",
)
async def delete_classroom(
    classroom_id: ClassroomId,
    actor: CurrentActor,
    service: Classrooms,
) -> ClassroomDeleteResponse:
    return await service.delete_classroom(classroom_id, actor)
