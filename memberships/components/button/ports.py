"""
Button component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from memberships.components.plans import PlanLookupPort

__all__ = ["AssetRequirementPort", "PlanLookupPort"]


class AssetRequirementPort(Protocol):
    """Collects client-side assets the rendered element needs."""

    def require(self, handle: str, dependencies: tuple[str, ...] = ()) -> None:
        """Declare that an asset bundle and its dependencies must be loaded."""
        ...
