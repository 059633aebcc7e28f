"""
Registrar component.

Public API for exposing the recurring payments capability to the host.
"""

from .component import FeatureRegistrar, register_recurring_payments
from .models import (
    MISSING_PLAN_REASON,
    RegistrationOutcome,
    RegistrationState,
    UnavailableReason,
)
from .ports import CapabilityHostPort, RenderCallback

__all__ = [
    # Functions
    "register_recurring_payments",
    "FeatureRegistrar",
    # Models
    "MISSING_PLAN_REASON",
    "RegistrationOutcome",
    "RegistrationState",
    "UnavailableReason",
    # Ports
    "CapabilityHostPort",
    "RenderCallback",
]
