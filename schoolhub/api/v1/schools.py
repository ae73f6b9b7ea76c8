# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School management API endpoints.

This module provides endpoints for school management:
- POST / - Create a new school
- GET / - List schools with filtering
- GET /{school_id} - Get school details with classroom and student counts
- PUT /{school_id} - Update school (isActive=false runs the delete guard)
- DELETE /{school_id} - Deactivate school (soft delete)

Every endpoint requires a superadmin.

Example:
    POST /api/v1/schools
    {
        "name": "Lincoln High School",
        "address": "12 Main Street",
        "establishedYear": 1952
    }
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from schoolhub.api.dependencies import CurrentActor, Schools
from schoolhub.models.common import OBJECT_ID_PATTERN, PaginatedResponse
from schoolhub.models.school import (
    SchoolCreateRequest,
    SchoolDeleteResponse,
    SchoolDetailResponse,
    SchoolResponse,
    SchoolUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

SchoolId = Annotated[str, Path(pattern=OBJECT_ID_PATTERN, description="School ID")]


@router.post(
    "",
    response_model=SchoolResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create school",
)
async def create_school(
    data: SchoolCreateRequest,
    actor: CurrentActor,
    service: Schools,
) -> SchoolResponse:
    return await service.create_school(data, actor)


@router.get(
    "",
    response_model=PaginatedResponse[SchoolResponse],
    summary="List schools",
    description="List schools newest first with optional name search and status filter.",
)
async def list_schools(
    actor: CurrentActor,
    service: Schools,
    search: Annotated[str | None, Query(description="Name substring")] = None,
    is_active: Annotated[bool | None, Query(alias="isActive")] = None,
    page: Annotated[int | None, Query(description="Page number")] = None,
    limit: Annotated[int | None, Query(description="Page size")] = None,
) -> PaginatedResponse[SchoolResponse]:
    return await service.list_schools(
        actor,
        is_active=is_active,
        search=search,
        page=page,
        limit=limit,
    )


@router.get(
    "/{school_id}",
    response_model=SchoolDetailResponse,
    summary="Get school",
)
async def get_school(
    school_id: SchoolId,
    actor: CurrentActor,
    service: Schools,
) -> SchoolDetailResponse:
    return await service.get_school(school_id, actor)


@router.put(
    "/{school_id}",
    response_model=SchoolResponse,
    summary="Update school",
)
async def update_school(
    school_id: SchoolId,
    data: SchoolUpdateRequest,
    actor: CurrentActor,
    service: Schools,
) -> SchoolResponse:
    return await service.update_school(school_id, data, actor)


@router.delete(
    "/{school_id}",
    response_model=SchoolDeleteResponse,
    summary="Deactivate school",
    description="Soft delete. Rejected while the school has active classrooms or students.",
)
async def delete_school(
    school_id: SchoolId,
    actor: CurrentActor,
    service: Schools,
) -> SchoolDeleteResponse:
    return await service.delete_school(school_id, actor)
