"""
Plans component.

Public API for the plan repository contract.
"""

from .component import (
    DEFAULT_META_PREFIX,
    allow_rest_api_types,
    allow_sync_post_meta,
    find_renderable_plan,
    get_plan_property_mapping,
    is_renderable,
    plan_field_storage_keys,
    run,
)
from .models import FindPlanInput, FindPlanOutput, PlanLookupReason, PlanProperty
from .ports import PlanLookupPort, PlanRepoPort

__all__ = [
    # Functions
    "allow_rest_api_types",
    "allow_sync_post_meta",
    "find_renderable_plan",
    "get_plan_property_mapping",
    "is_renderable",
    "plan_field_storage_keys",
    "run",
    "DEFAULT_META_PREFIX",
    # Models
    "FindPlanInput",
    "FindPlanOutput",
    "PlanLookupReason",
    "PlanProperty",
    # Ports
    "PlanLookupPort",
    "PlanRepoPort",
]
