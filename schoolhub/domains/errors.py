# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain error taxonomy shared by all services.

Every expected failure raised by a service is a ServiceError tagged with
an ErrorKind. The API layer maps each kind to exactly one HTTP status, so
adding a kind without a mapping is caught by the error handler tests.

Services define their own subclasses (SchoolNotFoundError,
ClassroomFullError, ...) that fix the kind and a default message.

Example:
    >>> class SchoolNotFoundError(ServiceError):
    ...     kind = ErrorKind.NOT_FOUND
    ...     default_message = "School not found"
    >>> err = SchoolNotFoundError()
    >>> err.kind, err.message
    (<ErrorKind.NOT_FOUND: 'not_found'>, 'School not found')
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Category of an expected domain failure."""

    AUTHENTICATION_REQUIRED = "authentication_required"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    CONFLICT_DUPLICATE = "conflict_duplicate"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    INVALID_STATE = "invalid_state"


class ServiceError(Exception):
    """Base exception for expected domain failures.

    Attributes:
        kind: Error category used for HTTP status mapping.
        message: User-safe description.
        details: Extra fields merged into the error response body.
    """

    kind: ErrorKind = ErrorKind.INVALID_STATE
    default_message: str = "Operation failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationRequiredError(ServiceError):
    """Raised when an operation is attempted without an actor."""

    kind = ErrorKind.AUTHENTICATION_REQUIRED
    default_message = "Authentication required"


class ForbiddenError(ServiceError):
    """Raised when the actor's role or tenant does not allow the operation."""

    kind = ErrorKind.FORBIDDEN
    default_message = "Access denied."
