# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Declarative base and shared column mixins.

Every table uses application-generated 24-character hex identifiers,
timezone-aware UTC timestamps and, for the managed entities, an explicit
lifecycle status in place of hard deletion.
"""

import enum
import secrets
from datetime import datetime

from sqlalchemy import DateTime, Enum, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from schoolhub.utils.datetime import utc_now

OBJECT_ID_LENGTH = 24


def new_object_id() -> str:
    """Generate a new 24-character lowercase hex identifier."""
    return secrets.token_hex(OBJECT_ID_LENGTH // 2)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class LifecycleStatus(str, enum.Enum):
    """Lifecycle state of a managed entity.

    Inactive records are kept for history and never removed.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"

    @classmethod
    def from_flag(cls, is_active: bool) -> "LifecycleStatus":
        return cls.ACTIVE if is_active else cls.INACTIVE


lifecycle_status_type = Enum(
    LifecycleStatus,
    name="lifecycle_status",
    native_enum=False,
    length=20,
    values_callable=lambda members: [m.value for m in members],
)


class ObjectIdMixin:
    """Primary key column holding an ObjectId-shaped string."""

    id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH),
        primary_key=True,
        default=new_object_id,
    )


class TimestampMixin:
    """Adds created_at and updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
        server_default=func.now(),
    )


class LifecycleMixin:
    """Adds a lifecycle status column with active/inactive helpers."""

    status: Mapped[LifecycleStatus] = mapped_column(
        lifecycle_status_type,
        nullable=False,
        default=LifecycleStatus.ACTIVE,
        index=True,
    )

    @property
    def is_active(self) -> bool:
        """Whether the record is in the active lifecycle state."""
        return self.status == LifecycleStatus.ACTIVE

    def activate(self) -> None:
        self.status = LifecycleStatus.ACTIVE

    def deactivate(self) -> None:
        self.status = LifecycleStatus.INACTIVE
