# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial schema: schools, users, classrooms, students, student_transfers.

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-01-15
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column("id", sa.String(24), primary_key=True)


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def _status_column() -> sa.Column:
    return sa.Column("status", sa.String(20), nullable=False, server_default="active")


def upgrade() -> None:
    """Create all tables."""
    # =========================================================================
    # Schools
    # =========================================================================
    op.create_table(
        "schools",
        _id_column(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("principal", sa.String(100), nullable=True),
        sa.Column("established_year", sa.Integer, nullable=True),
        sa.Column("created_by", sa.String(24), nullable=True),
        _status_column(),
        *_timestamp_columns(),
    )
    op.create_index("ix_schools_name", "schools", ["name"])
    op.create_index("ix_schools_status", "schools", ["status"])
    op.create_index("ix_schools_created_at", "schools", ["created_at"])

    # =========================================================================
    # Users
    # =========================================================================
    op.create_table(
        "users",
        _id_column(),
        sa.Column("username", sa.String(20), nullable=False, unique=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column(
            "school_id",
            sa.String(24),
            sa.ForeignKey("schools.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamp_columns(),
    )
    op.create_index("ix_users_school_id", "users", ["school_id"])
    op.create_index("ix_users_created_at", "users", ["created_at"])

    # =========================================================================
    # Classrooms
    # =========================================================================
    op.create_table(
        "classrooms",
        _id_column(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column(
            "school_id",
            sa.String(24),
            sa.ForeignKey("schools.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("capacity", sa.Integer, nullable=False),
        sa.Column("grade", sa.String(50), nullable=True),
        sa.Column("section", sa.String(20), nullable=True),
        sa.Column("resources", sa.JSON, nullable=False),
        sa.Column("academic_year", sa.String(9), nullable=True),
        sa.Column("created_by", sa.String(24), nullable=True),
        _status_column(),
        *_timestamp_columns(),
    )
    op.create_index("ix_classrooms_school_id", "classrooms", ["school_id"])
    op.create_index("ix_classrooms_status", "classrooms", ["status"])
    op.create_index("ix_classrooms_created_at", "classrooms", ["created_at"])
    op.create_index(
        "ix_classrooms_school_name_year",
        "classrooms",
        ["school_id", "name", "academic_year"],
    )

    # =========================================================================
    # Students
    # =========================================================================
    op.create_table(
        "students",
        _id_column(),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("date_of_birth", sa.Date, nullable=True),
        sa.Column("gender", sa.String(10), nullable=True),
        sa.Column(
            "school_id",
            sa.String(24),
            sa.ForeignKey("schools.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "classroom_id",
            sa.String(24),
            sa.ForeignKey("classrooms.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("enrollment_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("guardian_name", sa.String(200), nullable=True),
        sa.Column("guardian_phone", sa.String(20), nullable=True),
        sa.Column("guardian_email", sa.String(255), nullable=True),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("created_by", sa.String(24), nullable=True),
        _status_column(),
        *_timestamp_columns(),
    )
    op.create_index("ix_students_school_id", "students", ["school_id"])
    op.create_index("ix_students_classroom_id", "students", ["classroom_id"])
    op.create_index("ix_students_status", "students", ["status"])
    op.create_index("ix_students_created_at", "students", ["created_at"])

    # =========================================================================
    # Student transfer history (append-only)
    # =========================================================================
    op.create_table(
        "student_transfers",
        _id_column(),
        sa.Column(
            "student_id",
            sa.String(24),
            sa.ForeignKey("students.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sequence", sa.Integer, nullable=False),
        sa.Column("from_school_id", sa.String(24), nullable=False),
        sa.Column("to_school_id", sa.String(24), nullable=False),
        sa.Column("from_classroom_id", sa.String(24), nullable=True),
        sa.Column("to_classroom_id", sa.String(24), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("reason", sa.String(500), nullable=False, server_default=""),
    )
    op.create_index("ix_student_transfers_student_id", "student_transfers", ["student_id"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("student_transfers")
    op.drop_table("students")
    op.drop_table("classrooms")
    op.drop_table("users")
    op.drop_table("schools")
