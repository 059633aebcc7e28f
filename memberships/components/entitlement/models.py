"""
Entitlement component models.

Data models for deciding whether recurring payments are available.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from memberships.domain.entities import DeploymentMode, SiteIdentity

# --- Configuration ---


@dataclass(frozen=True)
class EntitlementConfig:
    """Entitlement configuration from rules."""

    qualifying_markers: frozenset[str] = field(
        default_factory=lambda: frozenset(["premium-plan", "business-plan", "ecommerce-plan"])
    )
    required_capability: str = "recurring-payments"
    required_feature: str = "memberships"
    required_plans: dict[DeploymentMode, str] = field(
        default_factory=lambda: {
            DeploymentMode.AUTHORITATIVE: "value_bundle",
            DeploymentMode.CONNECTED_CLIENT: "jetpack_premium",
        }
    )


# --- Input/Output ---


@dataclass(frozen=True)
class CheckEntitlementInput:
    """Input for an entitlement check."""

    identity: SiteIdentity


@dataclass(frozen=True)
class EntitlementDecision:
    """
    Result of an entitlement check.

    required_feature and required_plan are always filled so a disabled
    decision can be turned into an upgrade prompt.
    """

    enabled: bool
    required_feature: str
    required_plan: str
    reason: str
