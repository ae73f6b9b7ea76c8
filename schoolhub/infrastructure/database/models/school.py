# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School model.

A school is the tenant boundary: school admins only ever see the
classrooms and students whose school_id matches their own.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from schoolhub.infrastructure.database.models.base import (
    OBJECT_ID_LENGTH,
    Base,
    LifecycleMixin,
    ObjectIdMixin,
    TimestampMixin,
)


class School(Base, ObjectIdMixin, TimestampMixin, LifecycleMixin):
    """School entity.

    Name uniqueness among active schools is case-insensitive and checked
    by the service layer before writes.
    """

    __tablename__ = "schools"

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    address: Mapped[str | None] = mapped_column(String(500))
    phone: Mapped[str | None] = mapped_column(String(20))
    email: Mapped[str | None] = mapped_column(String(255))
    principal: Mapped[str | None] = mapped_column(String(100))
    established_year: Mapped[int | None] = mapped_column(Integer)
    created_by: Mapped[str | None] = mapped_column(String(OBJECT_ID_LENGTH))

    def __repr__(self) -> str:
        return f"<School(id={self.id}, name={self.name!r}, status={self.status})>"
