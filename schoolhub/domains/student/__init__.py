# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student enrollment and transfer domain."""

from schoolhub.domains.student.service import (
    ClassroomSchoolMismatchError,
    CrossSchoolTransferForbiddenError,
    PlacementInactiveError,
    StudentAlreadyInactiveError,
    StudentEmailExistsError,
    StudentInactiveError,
    StudentNotFoundError,
    StudentService,
    StudentServiceError,
    TransferTargetNotFoundError,
    TransferTargetRequiredError,
)

__all__ = [
    "ClassroomSchoolMismatchError",
    "CrossSchoolTransferForbiddenError",
    "PlacementInactiveError",
    "StudentAlreadyInactiveError",
    "StudentEmailExistsError",
    "StudentInactiveError",
    "StudentNotFoundError",
    "StudentService",
    "StudentServiceError",
    "TransferTargetNotFoundError",
    "TransferTargetRequiredError",
]
