# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School management domain."""

from schoolhub.domains.school.service import (
    SchoolAlreadyInactiveError,
    SchoolHasActiveDependentsError,
    SchoolNameExistsError,
    SchoolNotFoundError,
    SchoolService,
    SchoolServiceError,
)

__all__ = [
    "SchoolAlreadyInactiveError",
    "SchoolHasActiveDependentsError",
    "SchoolNameExistsError",
    "SchoolNotFoundError",
    "SchoolService",
    "SchoolServiceError",
]
