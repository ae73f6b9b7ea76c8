# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared API models, field types and validators.

All request and response models use camelCase on the wire
(``isActive``, ``schoolId``) and snake_case in Python. Field-level rules
live here as reusable Annotated types so every entity validates
identifiers, phones, names and academic years the same way.
"""

import math
import re
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, StringConstraints
from pydantic.alias_generators import to_camel

from schoolhub.utils.datetime import ensure_utc, utc_now

T = TypeVar("T")

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"
PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]{7,20}$")
ACADEMIC_YEAR_PATTERN = re.compile(r"^(\d{4})-(\d{4})$")
PASSWORD_SPECIAL_CHARS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")
MIN_ESTABLISHED_YEAR = 1800


class CamelModel(BaseModel):
    """Base model with camelCase aliases.

    Accepts both camelCase and snake_case on input, reads from ORM
    attributes and serializes by alias.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


def validate_phone(value: str) -> str:
    """Check phone formatting and digit count (7 to 15 digits)."""
    if not PHONE_PATTERN.match(value):
        raise ValueError("Invalid phone number format")
    digits = re.sub(r"\D", "", value)
    if not 7 <= len(digits) <= 15:
        raise ValueError("Phone number must contain 7 to 15 digits")
    return value


def validate_academic_year(value: str) -> str:
    """Require YYYY-YYYY where the second year follows the first."""
    match = ACADEMIC_YEAR_PATTERN.match(value)
    if not match:
        raise ValueError("Academic year must use the format YYYY-YYYY")
    start, end = (int(part) for part in match.groups())
    if end != start + 1:
        raise ValueError("Academic year must span consecutive years (e.g. 2024-2025)")
    return value


def validate_established_year(value: int) -> int:
    current_year = utc_now().year
    if not MIN_ESTABLISHED_YEAR <= value <= current_year:
        raise ValueError(
            f"Established year must be between {MIN_ESTABLISHED_YEAR} and {current_year}"
        )
    return value


def validate_past_date(value: date) -> date:
    if value >= utc_now().date():
        raise ValueError("Date of birth must be in the past")
    return value


def validate_password_strength(value: str) -> str:
    """Require upper and lower case letters, a digit and a special character."""
    checks = (
        (r"[A-Z]", "an uppercase letter"),
        (r"[a-z]", "a lowercase letter"),
        (r"\d", "a digit"),
    )
    for pattern, label in checks:
        if not re.search(pattern, value):
            raise ValueError(f"Password must contain {label}")
    if not PASSWORD_SPECIAL_CHARS.search(value):
        raise ValueError("Password must contain a special character")
    return value


def dedupe_preserving_order(values: list[str]) -> list[str]:
    """Drop repeated entries, keeping the first occurrence."""
    return list(dict.fromkeys(values))


ObjectId = Annotated[
    str, StringConstraints(strip_whitespace=True, to_lower=True, pattern=OBJECT_ID_PATTERN)
]
PhoneNumber = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(validate_phone)]
AcademicYear = Annotated[
    str, StringConstraints(strip_whitespace=True), AfterValidator(validate_academic_year)
]
HumanName = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=1,
        max_length=100,
        pattern=r"^[a-zA-Z\s\-']+$",
    ),
]
EstablishedYear = Annotated[int, AfterValidator(validate_established_year)]
PastDate = Annotated[date, AfterValidator(validate_past_date)]
UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]
# Emails are compared and stored lowercased
LowerEmail = Annotated[EmailStr, AfterValidator(str.lower)]
ResourceName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
ResourceList = Annotated[list[ResourceName], AfterValidator(dedupe_preserving_order)]


class PaginationMeta(CamelModel):
    """Pagination block returned by every listing."""

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class PaginatedResponse(CamelModel, Generic[T]):
    items: list[T]
    pagination: PaginationMeta


class PageRequest(CamelModel):
    """Normalised page number and size.

    Out-of-range values are clamped rather than rejected: page below 1
    becomes 1, limit is pulled into [1, max_limit].
    """

    page: int = 1
    limit: int

    @classmethod
    def clamp(
        cls,
        page: int | None,
        limit: int | None,
        default_limit: int = 10,
        max_limit: int = 100,
    ) -> "PageRequest":
        page = max(1, page or 1)
        if limit is None:
            limit = default_limit
        limit = min(max(1, limit), max_limit)
        return cls(page=page, limit=limit)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class ErrorResponse(BaseModel):
    """Error body: ``{"error": "..."}`` plus optional detail fields."""

    model_config = ConfigDict(extra="allow")

    error: str


class FieldError(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    errors: list[FieldError] = Field(default_factory=list)
