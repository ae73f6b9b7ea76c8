# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Deactivation cascade rules.

Every effect that deactivating one entity has on related entities is
listed in CASCADE_RULES:

- BLOCK: the parent cannot be deactivated while active children point at it.
- DETACH: the deactivated record drops its own reference to the target,
  freeing the target (a student leaving releases its classroom seat).

Nothing is ever deactivated transitively.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.infrastructure.database.models import (
    Classroom,
    LifecycleStatus,
    School,
    Student,
)


class CascadeAction(str, Enum):
    BLOCK = "block"
    DETACH = "detach"


@dataclass(frozen=True)
class CascadeRule:
    """One deactivation effect between two entity types.

    Attributes:
        entity: Entity type being deactivated.
        related: Entity type affected by the rule.
        foreign_key: Column linking the two. For BLOCK it lives on the
            related (child) entity, for DETACH on the deactivated entity.
        action: What happens on deactivation.
        detail_key: Key under which a BLOCK count is reported.
    """

    entity: str
    related: str
    foreign_key: str
    action: CascadeAction
    detail_key: str | None = None


CASCADE_RULES: tuple[CascadeRule, ...] = (
    CascadeRule("school", "classroom", "school_id", CascadeAction.BLOCK, "activeClassrooms"),
    CascadeRule("school", "student", "school_id", CascadeAction.BLOCK, "activeStudents"),
    CascadeRule("classroom", "student", "classroom_id", CascadeAction.BLOCK, "activeStudents"),
    CascadeRule("student", "classroom", "classroom_id", CascadeAction.DETACH),
)

ENTITY_MODELS: dict[str, Any] = {
    "school": School,
    "classroom": Classroom,
    "student": Student,
}


def rules_for(entity: str, action: CascadeAction | None = None) -> list[CascadeRule]:
    """Return the rules triggered by deactivating an entity type."""
    return [
        rule
        for rule in CASCADE_RULES
        if rule.entity == entity and (action is None or rule.action == action)
    ]


async def count_blocking_dependents(
    db: AsyncSession,
    entity: str,
    record_id: str,
) -> dict[str, int]:
    """Count active children for every BLOCK rule of an entity type.

    Args:
        db: Async database session.
        entity: Entity type being deactivated.
        record_id: Identifier of the record being deactivated.

    Returns:
        Mapping of detail key to active child count, zero counts included.
    """
    counts: dict[str, int] = {}
    for rule in rules_for(entity, CascadeAction.BLOCK):
        model = ENTITY_MODELS[rule.related]
        stmt = (
            select(func.count())
            .select_from(model)
            .where(
                getattr(model, rule.foreign_key) == record_id,
                model.status == LifecycleStatus.ACTIVE,
            )
        )
        result = await db.execute(stmt)
        counts[rule.detail_key or rule.related] = result.scalar() or 0
    return counts


def is_blocked(counts: dict[str, int]) -> bool:
    return any(count > 0 for count in counts.values())


def apply_detach_rules(entity: str, record: Any) -> list[str]:
    """Clear the references a deactivated record gives up.

    Returns:
        Names of the columns that were cleared.
    """
    cleared = []
    for rule in rules_for(entity, CascadeAction.DETACH):
        if getattr(record, rule.foreign_key) is not None:
            setattr(record, rule.foreign_key, None)
            cleared.append(rule.foreign_key)
    return cleared
