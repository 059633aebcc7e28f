"""
Button component - recurring payments purchase button.

Turns a plan lookup plus untrusted caller attributes into one sanitized
button element, or nothing.

Invariants:
- Never raises; any invalid input or failed lookup renders nothing
- Only published plans of the plan record type are rendered
- Every dynamic value is escaped for its markup context
- Identical inputs produce byte-identical markup
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from memberships.components.plans import find_renderable_plan
from memberships.domain.sanitize import escape_attr, sanitize_button_label, sanitize_hex_color
from memberships.rules.models import Rules

from .models import (
    ButtonRenderContext,
    ButtonRenderRequest,
    ButtonRenderResult,
    NoRender,
    NoRenderReason,
    RenderedButton,
)
from .ports import AssetRequirementPort, PlanLookupPort

logger = logging.getLogger(__name__)

_LOOKUP_REASONS: dict[str, NoRenderReason] = {
    "not_found": "not_found",
    "wrong_kind": "wrong_kind",
    "unpublished": "unpublished",
}

# Plan ids are SQLite INTEGER keys.
MAX_PLAN_ID = 2**63 - 1
MAX_PLAN_ID_DIGITS = len(str(MAX_PLAN_ID))


# --- Attribute Validation ---


def parse_plan_id(value: Any) -> int | None:
    """
    Positive integer plan id, or None if the value is not one.

    Whole-number floats (42.0, as JSON clients send them) are accepted.
    Digit strings longer than MAX_PLAN_ID_DIGITS are rejected before
    conversion, and ids above MAX_PLAN_ID are rejected outright.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        plan_id = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        plan_id = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdigit()) or len(text) > MAX_PLAN_ID_DIGITS:
            return None
        plan_id = int(text)
    else:
        return None
    return plan_id if 0 < plan_id <= MAX_PLAN_ID else None


def build_label(request: ButtonRenderRequest, context: ButtonRenderContext) -> str:
    """Sanitized label; the caller's text replaces the default when given."""
    text = context.default_label
    if request.submit_button_text is not None:
        text = str(request.submit_button_text)
    return sanitize_button_label(text)


def build_classes(
    plan_id: int, request: ButtonRenderRequest, context: ButtonRenderContext
) -> tuple[str, ...]:
    """Base classes, the plan class, then the caller's class."""
    classes = [*context.base_classes, f"{context.css_classname_prefix}-{plan_id}"]
    if request.extra_css_class is not None:
        classes.append(str(request.extra_css_class))
    return tuple(classes)


def build_styles(request: ButtonRenderRequest) -> tuple[str, ...]:
    """Inline style declarations for valid hex colors only."""
    styles: list[str] = []
    background = sanitize_hex_color(request.custom_background_color)
    if background:
        styles.append(f"background-color: {background}")
    color = sanitize_hex_color(request.custom_text_color)
    if color:
        styles.append(f"color: {color}")
    return tuple(styles)


def render_button_html(
    plan_id: int,
    label: str,
    classes: tuple[str, ...],
    styles: tuple[str, ...],
    context: ButtonRenderContext,
) -> str:
    """Button markup; label must already be sanitized."""
    return (
        f'<button data-blog-id="{escape_attr(context.site_id)}"'
        f' data-powered-text="{escape_attr(context.powered_text)}"'
        f' data-plan-id="{escape_attr(plan_id)}"'
        f' data-lang="{escape_attr(context.locale)}"'
        f' class="{escape_attr(" ".join(classes))}"'
        f' style="{escape_attr(";".join(styles))}">'
        f"{label}</button>"
    )


def _declare_assets(assets: AssetRequirementPort, context: ButtonRenderContext) -> None:
    try:
        assets.require(context.block_name, context.asset_dependencies)
    except Exception:
        logger.warning(f"Could not declare assets for {context.block_name}", exc_info=True)


# --- Render ---


def render(
    request: ButtonRenderRequest,
    plan_lookup: PlanLookupPort,
    context: ButtonRenderContext,
    assets: AssetRequirementPort | None = None,
) -> ButtonRenderResult:
    """
    Render the purchase button for a plan.

    Args:
        request: Caller attributes (untrusted)
        plan_lookup: Plan repository
        context: Site values stamped on the button
        assets: Optional collector for client-side asset requirements

    Returns:
        RenderedButton, or NoRender when the plan cannot be shown
    """
    if assets is not None:
        _declare_assets(assets, context)

    plan_id = parse_plan_id(request.plan_id)
    if plan_id is None:
        return NoRender(reason="invalid_plan_id")

    try:
        lookup = find_renderable_plan(plan_id, plan_lookup)
    except Exception:
        logger.warning(f"Plan lookup failed for plan {plan_id}", exc_info=True)
        return NoRender(reason="lookup_failed")

    if lookup.plan is None:
        logger.debug(f"Not rendering plan {plan_id}: {lookup.reason}")
        return NoRender(reason=_LOOKUP_REASONS.get(lookup.reason, "not_found"))

    label = build_label(request, context)
    classes = build_classes(plan_id, request, context)
    styles = build_styles(request)

    return RenderedButton(
        html=render_button_html(plan_id, label, classes, styles, context),
        plan_id=plan_id,
        classes=classes,
        styles=styles,
    )


# --- Renderer (host callback) ---


class ButtonRenderer:
    """
    Render callback handed to the host platform.

    Called with raw block attributes; returns markup or an empty string.
    """

    def __init__(
        self,
        plan_lookup: PlanLookupPort,
        context: ButtonRenderContext,
        assets: AssetRequirementPort | None = None,
    ) -> None:
        self._plan_lookup = plan_lookup
        self._context = context
        self._assets = assets

    @property
    def context(self) -> ButtonRenderContext:
        return self._context

    def render(self, request: ButtonRenderRequest) -> ButtonRenderResult:
        return render(request, self._plan_lookup, self._context, self._assets)

    def __call__(self, attrs: Mapping[str, Any]) -> str:
        result = self.render(ButtonRenderRequest.from_attributes(attrs))
        if isinstance(result, RenderedButton):
            return result.html
        return ""


# --- Run Function (Atomic Component Pattern) ---


def run(
    input_data: ButtonRenderRequest,
    plan_lookup: PlanLookupPort,
    context: ButtonRenderContext,
    assets: AssetRequirementPort | None = None,
) -> ButtonRenderResult:
    """Atomic component entry point."""
    return render(input_data, plan_lookup, context, assets)


# --- Configuration Loader ---


def load_context_from_rules(rules: Rules, site_id: int | None = None) -> ButtonRenderContext:
    """
    Build the render context from rules.yaml.

    Args:
        rules: Parsed rules
        site_id: Site id to stamp on buttons, defaults to the configured site

    Returns:
        ButtonRenderContext instance
    """
    button = rules.button
    return ButtonRenderContext(
        site_id=site_id if site_id is not None else rules.site.site_id,
        locale=rules.site.locale,
        powered_text=button.powered_text,
        default_label=button.default_label,
        css_classname_prefix=button.css_classname_prefix,
        base_classes=tuple(button.base_classes),
        block_name=button.block_name,
        asset_dependencies=tuple(button.asset_dependencies),
    )
