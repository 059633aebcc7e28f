from pydantic import BaseModel, Field

from memberships.domain.entities import DeploymentMode


class SiteRules(BaseModel):
    site_id: int = Field(gt=0)
    deployment_mode: DeploymentMode
    locale: str = "en_US"
    # Site id on the authoritative backend, stored when the client connected
    connected_site_id: int | None = Field(default=None, gt=0)


class RemoteRules(BaseModel):
    base_url: str
    rest_base: str = "memberships"
    timeout_seconds: float = Field(default=10.0, gt=0)


class RequiredPlanRules(BaseModel):
    authoritative: str = "value_bundle"
    connected_client: str = "jetpack_premium"


class EntitlementRules(BaseModel):
    qualifying_markers: list[str] = Field(
        default_factory=lambda: ["premium-plan", "business-plan", "ecommerce-plan"]
    )
    required_capability: str = "recurring-payments"
    required_feature: str = "memberships"
    required_plan: RequiredPlanRules = Field(default_factory=RequiredPlanRules)


class ButtonRules(BaseModel):
    block_name: str = "recurring-payments"
    capability_name: str = "memberships/recurring-payments"
    css_classname_prefix: str = "memberships"
    base_classes: list[str] = Field(
        default_factory=lambda: [
            "wp-block-button__link",
            "components-button",
            "is-primary",
            "is-button",
            "wp-block-recurring-payments",
        ]
    )
    default_label: str = "Your contribution"
    powered_text: str = "Powered by Memberships"
    asset_dependencies: list[str] = Field(default_factory=lambda: ["thickbox", "polyfill"])


class PlansRules(BaseModel):
    meta_prefix: str = "memberships_"


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)
    required_env_authoritative: list[str] = Field(
        default_factory=lambda: ["MEMBERSHIPS_SECRET_KEY"]
    )
    required_env_connected_client: list[str] = Field(
        default_factory=lambda: ["MEMBERSHIPS_USER_TOKEN"]
    )


class Rules(BaseModel):
    site: SiteRules
    remote: RemoteRules
    entitlement: EntitlementRules = Field(default_factory=EntitlementRules)
    button: ButtonRules = Field(default_factory=ButtonRules)
    plans: PlansRules = Field(default_factory=PlansRules)
    ops: OpsRules = Field(default_factory=OpsRules)
