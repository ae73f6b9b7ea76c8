# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for error-to-HTTP translation."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from schoolhub.api.errors import ERROR_STATUS, register_exception_handlers, status_for
from schoolhub.domains.classroom import ClassroomFullError
from schoolhub.domains.errors import AuthenticationRequiredError, ErrorKind
from schoolhub.domains.school.service import SchoolHasActiveDependentsError
from schoolhub.infrastructure.database import DatabaseError


class Payload(BaseModel):
    name: str
    capacity: int


@pytest.fixture
def client() -> TestClient:
    """App whose routes raise the errors under test."""
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/full")
    async def full() -> dict:
        raise ClassroomFullError(details={"capacity": 1, "studentCount": 1})

    @app.get("/blocked")
    async def blocked() -> dict:
        raise SchoolHasActiveDependentsError(
            details={"activeClassrooms": 2, "activeStudents": 5}
        )

    @app.get("/anonymous")
    async def anonymous() -> dict:
        raise AuthenticationRequiredError()

    @app.get("/database")
    async def database() -> dict:
        raise DatabaseError("Database operation failed", RuntimeError("SELECT secret FROM x"))

    @app.post("/payload")
    async def payload(data: Payload) -> dict:
        return data.model_dump()

    return TestClient(app)


class TestStatusMapping:
    """Tests for the ErrorKind to status table."""

    def test_every_kind_is_mapped(self) -> None:
        assert set(ERROR_STATUS) == set(ErrorKind)

    @pytest.mark.parametrize(
        ("kind", "expected"),
        [
            (ErrorKind.AUTHENTICATION_REQUIRED, 401),
            (ErrorKind.FORBIDDEN, 403),
            (ErrorKind.NOT_FOUND, 404),
            (ErrorKind.VALIDATION_FAILED, 422),
            (ErrorKind.CONFLICT_DUPLICATE, 400),
            (ErrorKind.CAPACITY_EXCEEDED, 400),
            (ErrorKind.INVALID_STATE, 400),
        ],
    )
    def test_status_for(self, kind: ErrorKind, expected: int) -> None:
        assert status_for(kind) == expected

    def test_default_message(self) -> None:
        assert ClassroomFullError().message == "Classroom is at full capacity"
        assert ClassroomFullError("custom").message == "custom"
        assert ClassroomFullError().details == {}


class TestHandlers:
    """Tests for rendered error bodies."""

    def test_capacity_error_body(self, client: TestClient) -> None:
        response = client.get("/full")

        assert response.status_code == 400
        body = response.json()
        assert "full capacity" in body["error"]
        assert body["capacity"] == 1

    def test_details_are_merged(self, client: TestClient) -> None:
        response = client.get("/blocked")

        assert response.status_code == 400
        assert response.json()["activeClassrooms"] == 2
        assert response.json()["activeStudents"] == 5

    def test_authentication_error(self, client: TestClient) -> None:
        response = client.get("/anonymous")

        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required"}
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_database_error_hides_internals(self, client: TestClient) -> None:
        response = client.get("/database")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    def test_validation_errors_are_listed_by_field(self, client: TestClient) -> None:
        response = client.post("/payload", json={"name": "Room 1", "capacity": "many"})

        assert response.status_code == 422
        errors = response.json()["errors"]
        assert [error["field"] for error in errors] == ["capacity"]
        assert errors[0]["message"]

    def test_unknown_route_uses_error_body(self, client: TestClient) -> None:
        response = client.get("/missing")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}
