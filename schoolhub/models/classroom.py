# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Classroom request and response models."""

from typing import Annotated

from pydantic import Field, StringConstraints

from schoolhub.infrastructure.database.models.classroom import MAX_CAPACITY, MIN_CAPACITY
from schoolhub.models.common import (
    AcademicYear,
    CamelModel,
    ObjectId,
    ResourceList,
    UtcDatetime,
)

ClassroomName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Grade = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]
Section = Annotated[str, StringConstraints(strip_whitespace=True, max_length=20)]
Capacity = Annotated[int, Field(ge=MIN_CAPACITY, le=MAX_CAPACITY)]


class ClassroomCreateRequest(CamelModel):
    """Request body for creating a classroom.

    school_id may be omitted by school admins; it then defaults to their
    own school.
    """

    name: ClassroomName
    school_id: ObjectId | None = None
    capacity: Capacity
    grade: Grade | None = None
    section: Section | None = None
    resources: ResourceList = Field(default_factory=list)
    academic_year: AcademicYear | None = None


class ClassroomUpdateRequest(CamelModel):
    """Partial update. The owning school cannot be changed."""

    name: ClassroomName | None = None
    capacity: Capacity | None = None
    grade: Grade | None = None
    section: Section | None = None
    resources: ResourceList | None = None
    academic_year: AcademicYear | None = None
    is_active: bool | None = None


class ClassroomResponse(CamelModel):
    id: str
    name: str
    school_id: str
    capacity: int
    grade: str | None = None
    section: str | None = None
    resources: list[str]
    academic_year: str | None = None
    is_active: bool
    created_by: str | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime
    student_count: int
    available_seats: int


class ClassroomDetailResponse(ClassroomResponse):
    school_name: str | None = None


class ClassroomDeleteResponse(CamelModel):
    message: str
    classroom: ClassroomResponse
