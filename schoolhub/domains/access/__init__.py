# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Access policy: actors, roles and tenant scoping."""

from schoolhub.domains.access.policy import (
    Actor,
    Role,
    RoleNotAllowedError,
    SchoolAccessDeniedError,
    can_access_school,
    check_school_access,
    listing_scope,
    require_actor,
    require_role,
    resolve_effective_school,
)

__all__ = [
    "Actor",
    "Role",
    "RoleNotAllowedError",
    "SchoolAccessDeniedError",
    "can_access_school",
    "check_school_access",
    "listing_scope",
    "require_actor",
    "require_role",
    "resolve_effective_school",
]
