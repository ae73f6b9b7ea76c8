# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tenant access policy.

Pure functions deciding whether an actor may act on a school's resources.
Two roles exist: superadmins act on every school, school admins only on
the school stored in their token. Nothing here touches the database, so
the same inputs always yield the same decision.

Example:
    >>> admin = Actor(user_id="u1", role=Role.SCHOOL_ADMIN, school_id="s1")
    >>> resolve_effective_school(admin, None)
    's1'
    >>> check_school_access(admin, "s2")
    Traceback (most recent call last):
        ...
    schoolhub.domains.access.policy.SchoolAccessDeniedError: Access denied...
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from schoolhub.domains.errors import AuthenticationRequiredError, ForbiddenError


class Role(str, Enum):
    """Administrator role."""

    SUPERADMIN = "superadmin"
    SCHOOL_ADMIN = "school_admin"


@dataclass(frozen=True)
class Actor:
    """Authenticated caller, built from verified token claims.

    Attributes:
        user_id: Identifier of the acting user.
        role: Role of the acting user.
        school_id: Tenant of a school admin; None for superadmins.
    """

    user_id: str
    role: Role
    school_id: str | None = None

    def __post_init__(self) -> None:
        if self.role == Role.SCHOOL_ADMIN and not self.school_id:
            raise ValueError("school_admin actors must carry a school_id")

    @property
    def is_superadmin(self) -> bool:
        return self.role == Role.SUPERADMIN


class SchoolAccessDeniedError(ForbiddenError):
    """Raised when a school admin reaches outside their own school."""

    default_message = "Access denied. You can only access your assigned school."


class RoleNotAllowedError(ForbiddenError):
    """Raised when the actor's role is not permitted for an operation."""

    pass


def _same_school(left: object, right: object) -> bool:
    return str(left).lower() == str(right).lower()


def require_actor(actor: Actor | None) -> Actor:
    """Reject unauthenticated calls.

    Raises:
        AuthenticationRequiredError: If actor is None.
    """
    if actor is None:
        raise AuthenticationRequiredError()
    return actor


def require_role(
    actor: Actor | None,
    allowed_roles: Iterable[Role],
    message: str | None = None,
) -> Actor:
    """Require an authenticated actor holding one of the allowed roles.

    Args:
        actor: Acting user or None.
        allowed_roles: Roles permitted for the operation.
        message: Optional message for the forbidden case.

    Returns:
        The actor, known to be authenticated.

    Raises:
        AuthenticationRequiredError: If actor is None.
        RoleNotAllowedError: If the actor's role is not allowed.
    """
    actor = require_actor(actor)
    if actor.role not in set(allowed_roles):
        raise RoleNotAllowedError(message)
    return actor


def resolve_effective_school(
    actor: Actor | None,
    requested_school_id: str | None,
    message: str | None = None,
) -> str | None:
    """Work out which school an operation is scoped to.

    Superadmins get the requested id back unchanged, which may be None;
    the caller decides whether that is an error. School admins are pinned
    to their own school: omitting the id or repeating their own id both
    resolve to it, naming any other school is forbidden.

    Args:
        actor: Acting user or None.
        requested_school_id: School id supplied with the request, if any.
        message: Optional message for the forbidden case.

    Returns:
        The effective school id.

    Raises:
        AuthenticationRequiredError: If actor is None.
        SchoolAccessDeniedError: If a school admin names a foreign school.
    """
    actor = require_actor(actor)
    if actor.is_superadmin:
        return requested_school_id

    if requested_school_id and not _same_school(requested_school_id, actor.school_id):
        raise SchoolAccessDeniedError(message)
    return actor.school_id


def check_school_access(
    actor: Actor | None,
    target_school_id: str | None,
    message: str | None = None,
) -> None:
    """Check that the actor may touch resources of the target school.

    An absent target passes; scoping is then applied later by the caller.

    Raises:
        AuthenticationRequiredError: If actor is None.
        SchoolAccessDeniedError: If a school admin targets a foreign school.
    """
    if not can_access_school(require_actor(actor), target_school_id):
        raise SchoolAccessDeniedError(message)


def can_access_school(actor: Actor | None, target_school_id: str | None) -> bool:
    """Boolean form of check_school_access; False for anonymous callers."""
    if actor is None:
        return False
    if actor.is_superadmin or not target_school_id:
        return True
    return _same_school(target_school_id, actor.school_id)


def listing_scope(actor: Actor | None, requested_school_id: str | None) -> str | None:
    """School a listing is filtered to.

    School admins are pinned to their own school whatever filter they
    send. Superadmins get their filter back, None meaning every school.

    Raises:
        AuthenticationRequiredError: If actor is None.
    """
    actor = require_actor(actor)
    if actor.is_superadmin:
        return requested_school_id or None
    return actor.school_id
