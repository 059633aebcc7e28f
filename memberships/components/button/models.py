"""
Button component input/output models.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

NoRenderReason = Literal[
    "invalid_plan_id",
    "not_found",
    "wrong_kind",
    "unpublished",
    "lookup_failed",
]

# Host block attribute names
ATTR_PLAN_ID = "planId"
ATTR_SUBMIT_BUTTON_TEXT = "submitButtonText"
ATTR_BACKGROUND_COLOR = "customBackgroundButtonColor"
ATTR_TEXT_COLOR = "customTextButtonColor"
ATTR_CLASS_NAME = "className"


# --- Input Models ---


@dataclass(frozen=True)
class ButtonRenderRequest:
    """
    Untrusted caller attributes for one button.

    plan_id is kept as received; it is validated at render time.
    """

    plan_id: Any = None
    submit_button_text: str | None = None
    custom_background_color: str | None = None
    custom_text_color: str | None = None
    extra_css_class: str | None = None

    @classmethod
    def from_attributes(cls, attrs: Mapping[str, Any]) -> ButtonRenderRequest:
        """Build a request from host block attributes."""
        return cls(
            plan_id=attrs.get(ATTR_PLAN_ID),
            submit_button_text=_optional_str(attrs.get(ATTR_SUBMIT_BUTTON_TEXT)),
            custom_background_color=_optional_str(attrs.get(ATTR_BACKGROUND_COLOR)),
            custom_text_color=_optional_str(attrs.get(ATTR_TEXT_COLOR)),
            extra_css_class=_optional_str(attrs.get(ATTR_CLASS_NAME)),
        )


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class ButtonRenderContext:
    """Site-level values stamped onto every button."""

    site_id: int
    locale: str = "en_US"
    powered_text: str = "Powered by Memberships"
    default_label: str = "Your contribution"
    css_classname_prefix: str = "memberships"
    base_classes: tuple[str, ...] = (
        "wp-block-button__link",
        "components-button",
        "is-primary",
        "is-button",
        "wp-block-recurring-payments",
    )
    block_name: str = "recurring-payments"
    asset_dependencies: tuple[str, ...] = ("thickbox", "polyfill")


# --- Output Models ---


@dataclass(frozen=True)
class RenderedButton:
    """Rendered button markup."""

    html: str
    plan_id: int
    classes: tuple[str, ...] = field(default_factory=tuple)
    styles: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class NoRender:
    """Nothing is rendered; the reason is for logs only."""

    reason: NoRenderReason


ButtonRenderResult = RenderedButton | NoRender
