"""
Plans component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from memberships.domain.entities import Plan

PlanLookupReason = Literal["found", "not_found", "wrong_kind", "unpublished"]


@dataclass(frozen=True)
class FindPlanInput:
    """Input for looking up a renderable plan."""

    plan_id: int


@dataclass(frozen=True)
class FindPlanOutput:
    """Plan lookup result; plan is set only when it is renderable."""

    plan: Plan | None
    reason: PlanLookupReason

    @property
    def found(self) -> bool:
        return self.plan is not None


@dataclass(frozen=True)
class PlanProperty:
    """A plan field and the storage key that holds it."""

    name: str
    meta: str
