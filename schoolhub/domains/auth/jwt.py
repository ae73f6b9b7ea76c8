# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""JWT token management utilities.

Access tokens carry the tenancy claims the access policy needs:
the user id (``sub``), the role and, for school admins, the school id.

Example:
    >>> from schoolhub.core.config import get_settings
    >>> jwt_manager = JWTManager(get_settings().jwt)
    >>> token = jwt_manager.create_access_token(user_id="...", role="superadmin")
    >>> claims = jwt_manager.decode_token(token)
    >>> actor = claims.to_actor()
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Literal

from jose import ExpiredSignatureError, jwt
from pydantic import BaseModel, ValidationError

from schoolhub.core.config.settings import JWTSettings
from schoolhub.domains.access.policy import Actor, Role

logger = logging.getLogger(__name__)


class TokenPayload(BaseModel):
    """JWT token payload structure.

    Attributes:
        sub: Subject (user ID).
        type: Token type.
        role: Role of the user.
        school_id: Assigned school for school admins.
        username: Username at issue time.
        exp: Expiration timestamp.
        iat: Issued at timestamp.
        jti: JWT ID for token tracking.
    """

    sub: str
    type: Literal["access"] = "access"
    role: Role
    school_id: str | None = None
    username: str | None = None
    exp: int
    iat: int
    jti: str

    def to_actor(self) -> Actor:
        """Build the request actor from the verified claims.

        Raises:
            InvalidTokenError: If the claims are inconsistent
                (a school admin without a school).
        """
        try:
            return Actor(user_id=self.sub, role=self.role, school_id=self.school_id)
        except ValueError as e:
            raise InvalidTokenError(f"Invalid token claims: {e}") from e


class JWTError(Exception):
    """Base exception for JWT operations."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTManager:
    """JWT token creation and validation manager.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        self._settings = settings

    @property
    def expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return self._settings.access_token_expire_minutes * 60

    def create_access_token(
        self,
        user_id: str,
        role: Role | str,
        school_id: str | None = None,
        username: str | None = None,
    ) -> str:
        """Create an access token.

        Args:
            user_id: User identifier.
            role: Role of the user.
            school_id: Assigned school, only meaningful for school admins.
            username: Username, informational.

        Returns:
            JWT access token string.
        """
        now = datetime.now(timezone.utc)
        exp = now + timedelta(minutes=self._settings.access_token_expire_minutes)

        payload = {
            "sub": str(user_id),
            "type": "access",
            "role": Role(role).value,
            "school_id": str(school_id) if school_id else None,
            "username": username,
            "exp": int(exp.timestamp()),
            "iat": int(now.timestamp()),
            "jti": secrets.token_urlsafe(16),
        }

        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )

    def decode_token(self, token: str) -> TokenPayload:
        """Decode and validate a JWT token.

        Args:
            token: JWT token string.

        Returns:
            TokenPayload with decoded claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or its claims are malformed.
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except Exception as e:
            logger.warning("Token decode failed: %s", str(e))
            raise InvalidTokenError(f"Invalid token: {str(e)}")

        try:
            return TokenPayload.model_validate(payload)
        except ValidationError as e:
            logger.warning("Token claims rejected: %s", str(e))
            raise InvalidTokenError("Invalid token claims")

    def verify_token(self, token: str) -> bool:
        """Verify if a token is valid."""
        try:
            self.decode_token(token)
            return True
        except (TokenExpiredError, InvalidTokenError):
            return False
