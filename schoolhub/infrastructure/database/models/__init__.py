# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

Importing this package registers every table on Base.metadata.
"""

from schoolhub.infrastructure.database.models.base import (
    Base,
    LifecycleMixin,
    LifecycleStatus,
    ObjectIdMixin,
    TimestampMixin,
    new_object_id,
)
from schoolhub.infrastructure.database.models.classroom import (
    MAX_CAPACITY,
    MIN_CAPACITY,
    Classroom,
)
from schoolhub.infrastructure.database.models.school import School
from schoolhub.infrastructure.database.models.student import Student, StudentTransfer
from schoolhub.infrastructure.database.models.user import User

__all__ = [
    "Base",
    "Classroom",
    "LifecycleMixin",
    "LifecycleStatus",
    "MAX_CAPACITY",
    "MIN_CAPACITY",
    "ObjectIdMixin",
    "School",
    "Student",
    "StudentTransfer",
    "TimestampMixin",
    "User",
    "new_object_id",
]
