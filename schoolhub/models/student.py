# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student, enrollment and transfer models."""

from datetime import date
from typing import Annotated

from pydantic import Field, StringConstraints

from schoolhub.models.common import (
    CamelModel,
    Gender,
    HumanName,
    LowerEmail,
    ObjectId,
    PastDate,
    PhoneNumber,
    UtcDatetime,
)

GuardianName = Annotated[str, StringConstraints(strip_whitespace=True, max_length=200)]
Address = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]
TransferReason = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]


class StudentCreateRequest(CamelModel):
    """Request body for enrolling a student."""

    first_name: HumanName
    last_name: HumanName
    email: LowerEmail | None = None
    date_of_birth: PastDate | None = None
    gender: Gender | None = None
    school_id: ObjectId | None = None
    classroom_id: ObjectId | None = None
    guardian_name: GuardianName | None = None
    guardian_phone: PhoneNumber | None = None
    guardian_email: LowerEmail | None = None
    address: Address | None = None


class StudentUpdateRequest(CamelModel):
    """Partial update.

    classroom_id may only name a classroom of the student's current
    school; moving between schools goes through the transfer operation.
    """

    first_name: HumanName | None = None
    last_name: HumanName | None = None
    email: LowerEmail | None = None
    date_of_birth: PastDate | None = None
    gender: Gender | None = None
    classroom_id: ObjectId | None = None
    guardian_name: GuardianName | None = None
    guardian_phone: PhoneNumber | None = None
    guardian_email: LowerEmail | None = None
    address: Address | None = None
    is_active: bool | None = None


class TransferRequest(CamelModel):
    """Target of a transfer. At least one of the two ids must be given."""

    to_school_id: ObjectId | None = None
    to_classroom_id: ObjectId | None = None
    reason: TransferReason = ""


class TransferRecordResponse(CamelModel):
    from_school: str
    to_school: str
    from_classroom: str | None = None
    to_classroom: str | None = None
    date: UtcDatetime
    reason: str = ""
    from_school_name: str | None = None
    to_school_name: str | None = None
    from_classroom_name: str | None = None
    to_classroom_name: str | None = None


class StudentResponse(CamelModel):
    id: str
    first_name: str
    last_name: str
    full_name: str
    age: int | None = None
    email: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    school_id: str
    classroom_id: str | None = None
    enrollment_date: UtcDatetime
    guardian_name: str | None = None
    guardian_phone: str | None = None
    guardian_email: str | None = None
    address: str | None = None
    is_active: bool
    created_by: str | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class StudentDetailResponse(StudentResponse):
    school_name: str | None = None
    classroom_name: str | None = None
    transfer_history: list[TransferRecordResponse] = Field(default_factory=list)


class StudentDeleteResponse(CamelModel):
    message: str
    student: StudentResponse


class PlacementSummary(CamelModel):
    """School and classroom names on one side of a transfer."""

    school: str | None = None
    classroom: str | None = None


class TransferSummary(CamelModel):
    from_: PlacementSummary = Field(alias="from")
    to: PlacementSummary


class TransferResponse(CamelModel):
    message: str
    student: StudentDetailResponse
    transfer: TransferSummary
