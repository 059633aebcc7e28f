"""Memberships endpoints: connection status, registration outcome, button render."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from memberships.adapters.asset_registry import RequiredAssets
from memberships.adapters.sqlite.repos import SQLitePlanRepo
from memberships.api.deps import (
    get_button_context,
    get_config,
    get_plan_repo,
    get_registrar,
    get_status_service,
)
from memberships.app_shell.config import MembershipsConfig
from memberships.components.button import (
    ButtonRenderContext,
    ButtonRenderRequest,
    RenderedButton,
    render,
)
from memberships.components.registrar import FeatureRegistrar
from memberships.components.status import StatusError, StatusService

router = APIRouter()


class ButtonRenderResponse(BaseModel):
    rendered: bool
    html: str
    reason: str | None = None
    assets: list[str]


@router.get("/status")
def get_status(
    config: MembershipsConfig = Depends(get_config),
    service: StatusService = Depends(get_status_service),
) -> Any:
    """
    Connection status for the configured site.

    Typed errors are returned as {code, message} with the error's HTTP status.
    """
    result = service.resolve(config.identity)
    if isinstance(result, StatusError):
        return JSONResponse(status_code=result.http_status, content=result.to_dict())
    return result.model_dump(mode="json")


@router.get("/registration")
def get_registration(registrar: FeatureRegistrar = Depends(get_registrar)) -> dict[str, Any]:
    return registrar.register().to_dict()


@router.post("/button", response_model=ButtonRenderResponse)
def render_button(
    attributes: dict[str, Any] = Body(...),
    registrar: FeatureRegistrar = Depends(get_registrar),
    plan_repo: SQLitePlanRepo = Depends(get_plan_repo),
    context: ButtonRenderContext = Depends(get_button_context),
) -> ButtonRenderResponse:
    """Render the purchase button from raw block attributes."""
    outcome = registrar.register()
    if not outcome.exposed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=outcome.to_dict())

    assets = RequiredAssets()
    result = render(ButtonRenderRequest.from_attributes(attributes), plan_repo, context, assets)

    if isinstance(result, RenderedButton):
        return ButtonRenderResponse(rendered=True, html=result.html, assets=assets.handles())
    return ButtonRenderResponse(
        rendered=False, html="", reason=result.reason, assets=assets.handles()
    )
