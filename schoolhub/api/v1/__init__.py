# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    auth: Registration and login.
    users: Own profile.
    schools: School management (superadmin only).
    classrooms: Classroom management.
    students: Enrollment, updates and transfers.
"""

from fastapi import APIRouter

from schoolhub.api.v1 import auth, classrooms, schools, students, users
from schoolhub.models.common import ErrorResponse, ValidationErrorResponse

# Error bodies shared by every endpoint, for the OpenAPI schema
ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": ErrorResponse, "description": "Duplicate, capacity or state conflict"},
    401: {"model": ErrorResponse, "description": "Authentication required"},
    403: {"model": ErrorResponse, "description": "Role or school access denied"},
    404: {"model": ErrorResponse, "description": "Referenced record not found"},
    422: {"model": ValidationErrorResponse, "description": "Invalid request fields"},
}

router = APIRouter(prefix="/api/v1", responses=ERROR_RESPONSES)

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(schools.router, prefix="/schools", tags=["Schools"])
router.include_router(classrooms.router, prefix="/classrooms", tags=["Classrooms"])
router.include_router(students.router, prefix="/students", tags=["Students"])
