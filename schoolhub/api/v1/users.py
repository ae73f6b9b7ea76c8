# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Profile endpoints for the authenticated administrator."""

import logging

from fastapi import APIRouter

from schoolhub.api.dependencies import CurrentActor, Users
from schoolhub.models.user import UserProfileResponse, UserUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/me",
    response_model=UserProfileResponse,
    summary="Get own profile",
)
async def get_me(actor: CurrentActor, service: Users) -> UserProfileResponse:
    return await service.get_profile(actor)


@router.put(
    "/me",
    response_model=UserProfileResponse,
    summary="Update own profile",
    description="Change username, email or password. Uniqueness is re-checked.",
)
async def update_me(
    data: UserUpdateRequest,
    actor: CurrentActor,
    service: Users,
) -> UserProfileResponse:
    return await service.update_profile(actor, data)
