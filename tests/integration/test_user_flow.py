# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database-backed tests for registration, login and profiles."""

import pytest

from schoolhub.domains.access import Actor, Role
from schoolhub.domains.auth import JWTManager
from schoolhub.domains.errors import AuthenticationRequiredError
from schoolhub.domains.user import (
    InvalidCredentialsError,
    InvalidSchoolError,
    SchoolRequiredError,
    UserConflictError,
    UserExistsError,
    UserService,
)
from schoolhub.models.user import LoginRequest, RegisterRequest, UserUpdateRequest

pytestmark = pytest.mark.integration

PASSWORD = "Secret#123"


def register_request(**overrides) -> RegisterRequest:
    fields = {
        "username": "root_admin",
        "email": "root@example.com",
        "password": PASSWORD,
        "role": "superadmin",
    }
    fields.update(overrides)
    return RegisterRequest(**fields)


class TestRegister:
    async def test_superadmin(self, user_service: UserService, jwt_manager: JWTManager) -> None:
        auth = await user_service.register_user(register_request())

        assert auth.user.role == Role.SUPERADMIN
        assert auth.user.school_id is None
        assert auth.token_type == "Bearer"
        assert auth.expires_in == jwt_manager.expires_in

        payload = jwt_manager.decode_token(auth.access_token)
        assert payload.sub == auth.user.id
        assert payload.role == Role.SUPERADMIN

    async def test_school_admin_token_carries_school(
        self,
        create_school,
        user_service: UserService,
        jwt_manager: JWTManager,
    ) -> None:
        school = await create_school()

        auth = await user_service.register_user(
            register_request(
                username="lincoln_admin",
                email="admin@lincoln.example.com",
                role="school_admin",
                school_id=school.id,
            )
        )

        actor = jwt_manager.decode_token(auth.access_token).to_actor()
        assert actor.role == Role.SCHOOL_ADMIN
        assert actor.school_id == school.id

    async def test_school_admin_without_school(self, user_service: UserService) -> None:
        with pytest.raises(SchoolRequiredError):
            await user_service.register_user(register_request(role="school_admin"))

    async def test_unknown_school(self, user_service: UserService) -> None:
        with pytest.raises(InvalidSchoolError):
            await user_service.register_user(
                register_request(role="school_admin", school_id="f" * 24)
            )

    async def test_superadmin_school_is_not_stored(
        self,
        create_school,
        user_service: UserService,
    ) -> None:
        school = await create_school()

        auth = await user_service.register_user(register_request(school_id=school.id))

        assert auth.user.school_id is None

    @pytest.mark.parametrize(
        "overrides",
        [{"username": "other_name"}, {"email": "other@example.com"}],
    )
    async def test_duplicate(self, user_service: UserService, overrides: dict) -> None:
        await user_service.register_user(register_request())

        with pytest.raises(UserExistsError):
            await user_service.register_user(register_request(**overrides))


class TestLogin:
    async def test_success(self, user_service: UserService) -> None:
        registered = await user_service.register_user(register_request())

        auth = await user_service.login(LoginRequest(email="ROOT@example.com", password=PASSWORD))

        assert auth.user.id == registered.user.id
        assert auth.access_token

    async def test_wrong_password(self, user_service: UserService) -> None:
        await user_service.register_user(register_request())

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await user_service.login(LoginRequest(email="root@example.com", password="Wrong#123"))

        assert exc_info.value.message == "Invalid email or password"

    async def test_unknown_email(self, user_service: UserService) -> None:
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await user_service.login(LoginRequest(email="nobody@example.com", password=PASSWORD))

        assert exc_info.value.message == "Invalid email or password"


class TestProfile:
    async def test_get_profile_with_school_name(
        self,
        create_school,
        user_service: UserService,
    ) -> None:
        school = await create_school("Lincoln HS")
        auth = await user_service.register_user(
            register_request(role="school_admin", school_id=school.id)
        )
        actor = Actor(user_id=auth.user.id, role=Role.SCHOOL_ADMIN, school_id=school.id)

        profile = await user_service.get_profile(actor)

        assert profile.username == "root_admin"
        assert profile.school_name == "Lincoln HS"

    async def test_anonymous(self, user_service: UserService) -> None:
        with pytest.raises(AuthenticationRequiredError):
            await user_service.get_profile(None)

    async def test_update_password_then_login(self, user_service: UserService) -> None:
        auth = await user_service.register_user(register_request())
        actor = Actor(user_id=auth.user.id, role=Role.SUPERADMIN)

        await user_service.update_profile(actor, UserUpdateRequest(password="Changed#456"))

        relogin = await user_service.login(
            LoginRequest(email="root@example.com", password="Changed#456")
        )
        assert relogin.user.id == auth.user.id
        with pytest.raises(InvalidCredentialsError):
            await user_service.login(LoginRequest(email="root@example.com", password=PASSWORD))

    async def test_update_to_taken_username(self, user_service: UserService) -> None:
        await user_service.register_user(register_request())
        other = await user_service.register_user(
            register_request(username="second_admin", email="second@example.com")
        )
        actor = Actor(user_id=other.user.id, role=Role.SUPERADMIN)

        with pytest.raises(UserConflictError):
            await user_service.update_profile(actor, UserUpdateRequest(username="root_admin"))
