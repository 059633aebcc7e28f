"""
Entitlement component.

Public API for the recurring payments feature gate.
"""

from .component import (
    check_entitlement,
    is_feature_enabled,
    load_config_from_rules,
    required_plan_for,
    run,
)
from .models import CheckEntitlementInput, EntitlementConfig, EntitlementDecision
from .ports import PlanTierLookupPort

__all__ = [
    # Functions
    "check_entitlement",
    "is_feature_enabled",
    "load_config_from_rules",
    "required_plan_for",
    "run",
    # Models
    "CheckEntitlementInput",
    "EntitlementConfig",
    "EntitlementDecision",
    # Ports
    "PlanTierLookupPort",
]
