"""
Registrar component - exposes or suppresses the purchase button capability.

Invariants:
- Each registration cycle ends in exactly one of EXPOSED or SUPPRESSED
- The decision is made once per FeatureRegistrar lifetime
- SUPPRESSED always carries the required feature and plan
"""

from __future__ import annotations

import logging
import threading

from memberships.components.entitlement import (
    EntitlementConfig,
    PlanTierLookupPort,
    check_entitlement,
)
from memberships.domain.entities import SiteIdentity

from .models import RegistrationOutcome, RegistrationState, UnavailableReason
from .ports import CapabilityHostPort, RenderCallback

logger = logging.getLogger(__name__)


def register_recurring_payments(
    identity: SiteIdentity,
    capability_name: str,
    plan_tier_lookup: PlanTierLookupPort,
    host: CapabilityHostPort,
    render_callback: RenderCallback,
    config: EntitlementConfig | None = None,
) -> RegistrationOutcome:
    """
    Run one registration cycle.

    Asks the entitlement gate once, then either registers the capability
    with its render callback or marks it unavailable.
    """
    decision = check_entitlement(identity, plan_tier_lookup, config)

    if decision.enabled:
        host.register_capability(capability_name, render_callback)
        logger.info(f"Capability {capability_name} exposed for site {identity.site_id}")
        return RegistrationOutcome(
            state=RegistrationState.EXPOSED,
            capability_name=capability_name,
        )

    unavailable = UnavailableReason(
        required_feature=decision.required_feature,
        required_plan=decision.required_plan,
    )
    host.set_capability_unavailable(capability_name, unavailable.reason, unavailable.details())
    logger.info(
        f"Capability {capability_name} suppressed for site {identity.site_id}: "
        f"requires plan {unavailable.required_plan}"
    )
    return RegistrationOutcome(
        state=RegistrationState.SUPPRESSED,
        capability_name=capability_name,
        unavailable=unavailable,
    )


class FeatureRegistrar:
    """
    Process-lifetime registrar.

    The first call to register() decides the outcome; later calls return
    the same outcome without consulting the gate or the host again.
    """

    def __init__(
        self,
        identity: SiteIdentity,
        capability_name: str,
        plan_tier_lookup: PlanTierLookupPort,
        host: CapabilityHostPort,
        render_callback: RenderCallback,
        config: EntitlementConfig | None = None,
    ) -> None:
        self._identity = identity
        self._capability_name = capability_name
        self._plan_tier_lookup = plan_tier_lookup
        self._host = host
        self._render_callback = render_callback
        self._config = config
        self._outcome: RegistrationOutcome | None = None
        self._lock = threading.Lock()

    @property
    def outcome(self) -> RegistrationOutcome | None:
        return self._outcome

    def register(self) -> RegistrationOutcome:
        with self._lock:
            if self._outcome is None:
                self._outcome = register_recurring_payments(
                    self._identity,
                    self._capability_name,
                    self._plan_tier_lookup,
                    self._host,
                    self._render_callback,
                    self._config,
                )
            return self._outcome
