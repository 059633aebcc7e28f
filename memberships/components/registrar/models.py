"""
Registrar component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

MISSING_PLAN_REASON = "missing_plan"


class RegistrationState(str, Enum):
    """Terminal states of a registration cycle."""

    EXPOSED = "exposed"
    SUPPRESSED = "suppressed"


@dataclass(frozen=True)
class UnavailableReason:
    """Why the capability is unavailable, for the host's upgrade prompt."""

    required_feature: str
    required_plan: str
    reason: str = MISSING_PLAN_REASON

    def details(self) -> dict[str, str]:
        return {
            "required_feature": self.required_feature,
            "required_plan": self.required_plan,
        }


@dataclass(frozen=True)
class RegistrationOutcome:
    """Result of one registration cycle."""

    state: RegistrationState
    capability_name: str
    unavailable: UnavailableReason | None = None

    @property
    def exposed(self) -> bool:
        return self.state is RegistrationState.EXPOSED

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "capability": self.capability_name,
            "state": self.state.value,
        }
        if self.unavailable is not None:
            data["unavailable_reason"] = self.unavailable.reason
            data["details"] = self.unavailable.details()
        return data
