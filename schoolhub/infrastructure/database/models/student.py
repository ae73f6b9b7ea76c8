# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student and transfer history models."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from schoolhub.infrastructure.database.models.base import (
    OBJECT_ID_LENGTH,
    Base,
    LifecycleMixin,
    ObjectIdMixin,
    TimestampMixin,
)
from schoolhub.utils.datetime import utc_now, whole_years_between


class Student(Base, ObjectIdMixin, TimestampMixin, LifecycleMixin):
    """Student entity.

    When classroom_id is set it references a classroom of the same school.
    """

    __tablename__ = "students"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), unique=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date)
    gender: Mapped[str | None] = mapped_column(String(10))
    school_id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH),
        ForeignKey("schools.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    classroom_id: Mapped[str | None] = mapped_column(
        String(OBJECT_ID_LENGTH),
        ForeignKey("classrooms.id", ondelete="SET NULL"),
        index=True,
    )
    enrollment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    guardian_name: Mapped[str | None] = mapped_column(String(200))
    guardian_phone: Mapped[str | None] = mapped_column(String(20))
    guardian_email: Mapped[str | None] = mapped_column(String(255))
    address: Mapped[str | None] = mapped_column(String(500))
    created_by: Mapped[str | None] = mapped_column(String(OBJECT_ID_LENGTH))

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def age(self) -> int | None:
        """Age in whole years, or None when the date of birth is unknown."""
        if self.date_of_birth is None:
            return None
        return whole_years_between(self.date_of_birth, utc_now().date())

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name={self.full_name!r}, school_id={self.school_id})>"


class StudentTransfer(Base, ObjectIdMixin):
    """One entry of a student's transfer history.

    Rows are inserted once per transfer and never updated or deleted.
    """

    __tablename__ = "student_transfers"

    student_id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    from_school_id: Mapped[str] = mapped_column(String(OBJECT_ID_LENGTH), nullable=False)
    to_school_id: Mapped[str] = mapped_column(String(OBJECT_ID_LENGTH), nullable=False)
    from_classroom_id: Mapped[str | None] = mapped_column(String(OBJECT_ID_LENGTH))
    to_classroom_id: Mapped[str | None] = mapped_column(String(OBJECT_ID_LENGTH))
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    reason: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    def __repr__(self) -> str:
        return (
            f"<StudentTransfer(student_id={self.student_id}, "
            f"from={self.from_school_id}, to={self.to_school_id})>"
        )
