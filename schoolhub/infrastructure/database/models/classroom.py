# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Classroom model."""

from sqlalchemy import JSON, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from schoolhub.infrastructure.database.models.base import (
    OBJECT_ID_LENGTH,
    Base,
    LifecycleMixin,
    ObjectIdMixin,
    TimestampMixin,
)

MIN_CAPACITY = 1
MAX_CAPACITY = 500


class Classroom(Base, ObjectIdMixin, TimestampMixin, LifecycleMixin):
    """Classroom entity owned by exactly one school.

    school_id never changes after creation.
    """

    __tablename__ = "classrooms"
    __table_args__ = (
        Index("ix_classrooms_school_name_year", "school_id", "name", "academic_year"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    school_id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH),
        ForeignKey("schools.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    grade: Mapped[str | None] = mapped_column(String(50))
    section: Mapped[str | None] = mapped_column(String(20))
    resources: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    academic_year: Mapped[str | None] = mapped_column(String(9))
    created_by: Mapped[str | None] = mapped_column(String(OBJECT_ID_LENGTH))

    def __repr__(self) -> str:
        return (
            f"<Classroom(id={self.id}, name={self.name!r}, "
            f"school_id={self.school_id}, capacity={self.capacity})>"
        )
