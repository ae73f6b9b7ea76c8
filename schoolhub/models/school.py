# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School request and response models."""

from typing import Annotated

from pydantic import StringConstraints

from schoolhub.models.common import (
    CamelModel,
    EstablishedYear,
    LowerEmail,
    PhoneNumber,
    UtcDatetime,
)

SchoolName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=200)]
Address = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]
PrincipalName = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]


class SchoolCreateRequest(CamelModel):
    """Request body for creating a school."""

    name: SchoolName
    address: Address | None = None
    phone: PhoneNumber | None = None
    email: LowerEmail | None = None
    principal: PrincipalName | None = None
    established_year: EstablishedYear | None = None


class SchoolUpdateRequest(CamelModel):
    """Partial update; only fields present in the body change."""

    name: SchoolName | None = None
    address: Address | None = None
    phone: PhoneNumber | None = None
    email: LowerEmail | None = None
    principal: PrincipalName | None = None
    established_year: EstablishedYear | None = None
    is_active: bool | None = None


class SchoolResponse(CamelModel):
    id: str
    name: str
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    principal: str | None = None
    established_year: int | None = None
    is_active: bool
    created_by: str | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class SchoolDetailResponse(SchoolResponse):
    """Single school with live counts of its active classrooms and students."""

    classroom_count: int
    student_count: int


class SchoolDeleteResponse(CamelModel):
    message: str
    school: SchoolResponse
