"""
Button component.

Public API for rendering the recurring payments purchase button.
"""

from .component import (
    ButtonRenderer,
    build_classes,
    build_label,
    build_styles,
    load_context_from_rules,
    parse_plan_id,
    render,
    render_button_html,
    run,
)
from .models import (
    ButtonRenderContext,
    ButtonRenderRequest,
    ButtonRenderResult,
    NoRender,
    NoRenderReason,
    RenderedButton,
)
from .ports import AssetRequirementPort, PlanLookupPort

__all__ = [
    # Functions
    "build_classes",
    "build_label",
    "build_styles",
    "load_context_from_rules",
    "parse_plan_id",
    "render",
    "render_button_html",
    "run",
    "ButtonRenderer",
    # Models
    "ButtonRenderContext",
    "ButtonRenderRequest",
    "ButtonRenderResult",
    "NoRender",
    "NoRenderReason",
    "RenderedButton",
    # Ports
    "AssetRequirementPort",
    "PlanLookupPort",
]
