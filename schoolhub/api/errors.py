# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exception handlers translating failures into HTTP error bodies.

Domain errors carry an ErrorKind; each kind maps to exactly one status.
Error bodies are ``{"error": "..."}`` (plus any detail fields) or, for
request validation failures, ``{"errors": [{"field", "message"}, ...]}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from schoolhub.api.middleware.rate_limit import rate_limit_exceeded_handler
from schoolhub.domains.errors import ErrorKind, ServiceError
from schoolhub.infrastructure.database.connection import DatabaseError

logger = logging.getLogger(__name__)

# Starlette renamed the 422 constant; the number is stable
HTTP_422_UNPROCESSABLE = 422

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.AUTHENTICATION_REQUIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION_FAILED: HTTP_422_UNPROCESSABLE,
    ErrorKind.CONFLICT_DUPLICATE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CAPACITY_EXCEEDED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_STATE: status.HTTP_400_BAD_REQUEST,
}


def status_for(kind: ErrorKind) -> int:
    return ERROR_STATUS[kind]


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render a domain error as ``{"error": message, **details}``."""
    status_code = status_for(exc.kind)
    logger.info(
        "%s %s rejected: %s (%s)",
        request.method,
        request.url.path,
        exc.kind.value,
        exc.message,
    )

    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message, **exc.details},
        headers=headers,
    )


def _field_path(loc: tuple) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI puts first
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render request validation failures as a field-level error list."""
    errors = [
        {"field": _field_path(tuple(error.get("loc", ()))), "message": error.get("msg", "")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE,
        content={"errors": errors},
    )


async def http_error_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def database_error_handler(
    request: Request,
    exc: DatabaseError | SQLAlchemyError,
) -> JSONResponse:
    """Log the failure and return a generic 500 without internals."""
    logger.error("Database failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install every error handler on the application."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
