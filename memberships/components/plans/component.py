"""
Plans component - plan repository contract.

Resolves renderable plans and exposes which plan fields participate in
external sync.

Invariants:
- A plan is renderable only if published and of the plan record type
- Lookups never mutate plans
"""

from __future__ import annotations

from memberships.domain.entities import PLAN_RECORD_TYPE, Plan

from .models import FindPlanInput, FindPlanOutput, PlanProperty
from .ports import PlanLookupPort

DEFAULT_META_PREFIX = "memberships_"


def get_plan_property_mapping(meta_prefix: str = DEFAULT_META_PREFIX) -> dict[str, PlanProperty]:
    """Plan fields stored as metadata, keyed by field name."""
    return {
        "price": PlanProperty(name="price", meta=f"{meta_prefix}price"),
        "currency": PlanProperty(name="currency", meta=f"{meta_prefix}currency"),
    }


def plan_field_storage_keys(meta_prefix: str = DEFAULT_META_PREFIX) -> dict[str, str]:
    """Map of field name to storage key."""
    return {name: prop.meta for name, prop in get_plan_property_mapping(meta_prefix).items()}


def allow_sync_post_meta(
    existing: list[str], meta_prefix: str = DEFAULT_META_PREFIX
) -> list[str]:
    """Extend a sync allowlist with the plan metadata keys."""
    return [*existing, *plan_field_storage_keys(meta_prefix).values()]


def allow_rest_api_types(existing: list[str]) -> list[str]:
    """Extend an allowed record type list with the plan record type."""
    return [*existing, PLAN_RECORD_TYPE]


def is_renderable(plan: Plan) -> bool:
    return plan.record_type == PLAN_RECORD_TYPE and plan.status == "published"


def find_renderable_plan(plan_id: int, repo: PlanLookupPort) -> FindPlanOutput:
    """
    Look up a plan and check that it can be rendered.

    Args:
        plan_id: Plan identifier (already validated as positive)
        repo: Plan repository

    Returns:
        FindPlanOutput with the plan, or None and the reason it was rejected
    """
    plan = repo.find_plan(plan_id)
    if plan is None:
        return FindPlanOutput(plan=None, reason="not_found")
    if plan.record_type != PLAN_RECORD_TYPE:
        return FindPlanOutput(plan=None, reason="wrong_kind")
    if plan.status != "published":
        return FindPlanOutput(plan=None, reason="unpublished")
    return FindPlanOutput(plan=plan, reason="found")


def run(input_data: FindPlanInput, repo: PlanLookupPort) -> FindPlanOutput:
    """Atomic component entry point."""
    return find_renderable_plan(input_data.plan_id, repo)
