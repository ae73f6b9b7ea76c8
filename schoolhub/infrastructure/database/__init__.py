# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure.

Example:
    from schoolhub.infrastructure.database import get_session

    async with get_session() as session:
        result = await session.execute(select(School))
"""

from schoolhub.infrastructure.database.connection import (
    DatabaseError,
    close_database,
    create_engine_from_settings,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)

__all__ = [
    "DatabaseError",
    "close_database",
    "create_engine_from_settings",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_database",
]
