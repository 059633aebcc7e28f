from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# --- Enums / Literals ---
PlanStatus = Literal["draft", "published", "trashed"]

PLAN_RECORD_TYPE = "memberships_plan"


class DeploymentMode(str, Enum):
    """Where status and entitlement are decided."""

    AUTHORITATIVE = "authoritative"
    CONNECTED_CLIENT = "connected_client"


# --- Plans ---

class Plan(BaseModel):
    id: int
    title: str
    price: Decimal = Field(default=Decimal("0"), ge=0)
    currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$")
    status: PlanStatus = "draft"
    record_type: str = PLAN_RECORD_TYPE


# --- Site ---

class SiteIdentity(BaseModel):
    model_config = ConfigDict(frozen=True)

    site_id: int
    deployment_mode: DeploymentMode


# --- Connection Status ---

class ProductSummary(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int | str
    title: str = ""
    price: Decimal | None = None
    currency: str | None = None


class ConnectionStatus(BaseModel):
    products: list[ProductSummary] = Field(default_factory=list)
    connected_account_id: int | str | None = None
    connect_url: str | None = None
    upgrade_url: str | None = None
    should_upgrade_to_access_memberships: bool = False
