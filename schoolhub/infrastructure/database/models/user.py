# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User model for administrators."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from schoolhub.infrastructure.database.models.base import (
    OBJECT_ID_LENGTH,
    Base,
    ObjectIdMixin,
    TimestampMixin,
)


class User(Base, ObjectIdMixin, TimestampMixin):
    """Administrator account.

    school_id is only set for school admins and is the tenant they manage.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    school_id: Mapped[str | None] = mapped_column(
        String(OBJECT_ID_LENGTH),
        ForeignKey("schools.id", ondelete="SET NULL"),
        index=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r}, role={self.role})>"
