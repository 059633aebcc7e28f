"""
Entitlement component ports.
"""

from __future__ import annotations

from typing import Protocol


class PlanTierLookupPort(Protocol):
    """
    Port for plan tier and connection signals.

    Implementations:
    - SQLitePlanTierLookup: tier markers and cached plan features in SQLite
    """

    def site_markers(self, site_id: int) -> set[str]:
        """Tier markers attached to a site (authoritative mode)."""
        ...

    def is_connection_active(self) -> bool:
        """Whether this client is connected to the authoritative service."""
        ...

    def plan_supports(self, capability: str) -> bool:
        """Whether the site's plan includes the named capability."""
        ...
