# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Classroom management domain."""

from schoolhub.domains.classroom.service import (
    CapacityBelowEnrollmentError,
    ClassroomAlreadyInactiveError,
    ClassroomFullError,
    ClassroomHasActiveStudentsError,
    ClassroomNameExistsError,
    ClassroomNotFoundError,
    ClassroomService,
    ClassroomServiceError,
    SchoolIdRequiredError,
    SchoolInactiveError,
)

__all__ = [
    "CapacityBelowEnrollmentError",
    "ClassroomAlreadyInactiveError",
    "ClassroomFullError",
    "ClassroomHasActiveStudentsError",
    "ClassroomNameExistsError",
    "ClassroomNotFoundError",
    "ClassroomService",
    "ClassroomServiceError",
    "SchoolIdRequiredError",
    "SchoolInactiveError",
]
