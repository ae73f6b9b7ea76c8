# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request middleware: authentication and rate limiting."""

from schoolhub.api.middleware.auth import AuthMiddleware, get_current_actor
from schoolhub.api.middleware.rate_limit import limiter, rate_limit_exceeded_handler

__all__ = [
    "AuthMiddleware",
    "get_current_actor",
    "limiter",
    "rate_limit_exceeded_handler",
]
