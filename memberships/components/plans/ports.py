"""
Plan repository port definitions.
"""

from __future__ import annotations

from typing import Protocol

from memberships.domain.entities import Plan


class PlanLookupPort(Protocol):
    """Read-only plan lookup."""

    def find_plan(self, plan_id: int) -> Plan | None:
        """Get a record by id, or None if it does not exist."""
        ...


class PlanRepoPort(PlanLookupPort, Protocol):
    """Repository interface for plan records."""

    def list_plan_fields(self) -> dict[str, str]:
        """Map of plan field name to storage key."""
        ...
