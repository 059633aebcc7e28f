"""
Entitlement component.

Decides whether the recurring payments capability is available for a site.

Invariants:
- Never raises; a missing or failing signal means disabled
- Evaluated once per registration cycle, not per render
"""

from __future__ import annotations

import logging
from typing import assert_never

from memberships.domain.entities import DeploymentMode, SiteIdentity
from memberships.rules.models import Rules

from .models import CheckEntitlementInput, EntitlementConfig, EntitlementDecision
from .ports import PlanTierLookupPort

logger = logging.getLogger(__name__)


def required_plan_for(mode: DeploymentMode, config: EntitlementConfig | None = None) -> str:
    """Minimum plan tier to advertise when the feature is unavailable."""
    config = config or EntitlementConfig()
    return config.required_plans[mode]


def _has_qualifying_marker(
    site_id: int, lookup: PlanTierLookupPort, config: EntitlementConfig
) -> bool:
    markers = lookup.site_markers(site_id)
    return not config.qualifying_markers.isdisjoint(markers)


def _connected_plan_supports(lookup: PlanTierLookupPort, config: EntitlementConfig) -> bool:
    return lookup.is_connection_active() and lookup.plan_supports(config.required_capability)


def is_feature_enabled(
    identity: SiteIdentity,
    plan_tier_lookup: PlanTierLookupPort,
    config: EntitlementConfig | None = None,
) -> bool:
    """
    Whether recurring payments are enabled for the site.

    Authoritative sites need any qualifying tier marker. Connected clients
    need an active connection and a plan that supports the capability.
    """
    config = config or EntitlementConfig()

    try:
        match identity.deployment_mode:
            case DeploymentMode.AUTHORITATIVE:
                enabled = _has_qualifying_marker(identity.site_id, plan_tier_lookup, config)
            case DeploymentMode.CONNECTED_CLIENT:
                enabled = _connected_plan_supports(plan_tier_lookup, config)
            case _:
                assert_never(identity.deployment_mode)
    except Exception:
        logger.warning(
            f"Entitlement lookup failed for site {identity.site_id}, treating as disabled",
            exc_info=True,
        )
        return False

    logger.debug(
        f"is_feature_enabled: site_id={identity.site_id}, "
        f"mode={identity.deployment_mode.value}, enabled={enabled}"
    )
    return enabled


def check_entitlement(
    identity: SiteIdentity,
    plan_tier_lookup: PlanTierLookupPort,
    config: EntitlementConfig | None = None,
) -> EntitlementDecision:
    """Entitlement decision including what an upgrade would require."""
    config = config or EntitlementConfig()
    enabled = is_feature_enabled(identity, plan_tier_lookup, config)
    required_plan = required_plan_for(identity.deployment_mode, config)

    if enabled:
        reason = f"Site {identity.site_id} is entitled to '{config.required_feature}'"
    else:
        reason = f"'{config.required_feature}' requires plan '{required_plan}'"

    return EntitlementDecision(
        enabled=enabled,
        required_feature=config.required_feature,
        required_plan=required_plan,
        reason=reason,
    )


# --- Run Function (Atomic Component Pattern) ---


def run(
    input_data: CheckEntitlementInput,
    plan_tier_lookup: PlanTierLookupPort,
    config: EntitlementConfig | None = None,
) -> EntitlementDecision:
    """Atomic component entry point."""
    return check_entitlement(input_data.identity, plan_tier_lookup, config)


# --- Configuration Loader ---


def load_config_from_rules(rules: Rules) -> EntitlementConfig:
    """
    Load EntitlementConfig from rules.yaml.

    Args:
        rules: Parsed rules

    Returns:
        EntitlementConfig instance
    """
    entitlement = rules.entitlement
    return EntitlementConfig(
        qualifying_markers=frozenset(entitlement.qualifying_markers),
        required_capability=entitlement.required_capability,
        required_feature=entitlement.required_feature,
        required_plans={
            DeploymentMode.AUTHORITATIVE: entitlement.required_plan.authoritative,
            DeploymentMode.CONNECTED_CLIENT: entitlement.required_plan.connected_client,
        },
    )
