"""
Authoritative status endpoint.

Served when this deployment is the authoritative backend; connected
clients call it through HttpxRemoteStatusClient.

Key behaviors:
- Bearer token required (401 missing_token without one)
- Token must be signed with the deployment secret and scoped to the
  requested site (401 invalid_token otherwise)
- Only the configured site is served (404 unknown_site otherwise)
- Connected-client deployments do not serve the route
"""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from memberships.adapters.sqlite.repos import SQLiteMembershipStatusRepo
from memberships.api.auth_utils import decode_access_token, token_allows_site
from memberships.api.deps import get_config, get_status_repo
from memberships.app_shell.config import MembershipsConfig
from memberships.components.status import (
    MISSING_TOKEN_MESSAGE,
    StatusError,
    StatusErrorCode,
    resolve_status,
)
from memberships.domain.entities import DeploymentMode

router = APIRouter()

bearer_scheme = HTTPBearer(auto_error=False)

INVALID_TOKEN = "invalid_token"


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"code": code, "message": message})


@router.get("/sites/{site_id}/{rest_base}/status")
def get_site_status(
    site_id: int,
    rest_base: str,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    config: MembershipsConfig = Depends(get_config),
    repo: SQLiteMembershipStatusRepo = Depends(get_status_repo),
) -> Any:
    if config.deployment_mode is not DeploymentMode.AUTHORITATIVE:
        return _error(404, "rest_no_route", "No route was found matching the URL")
    if rest_base != config.rules.remote.rest_base:
        return _error(404, "rest_no_route", "No route was found matching the URL")

    if credentials is None or not credentials.credentials:
        return _error(401, StatusErrorCode.MISSING_TOKEN.value, MISSING_TOKEN_MESSAGE)

    claims = decode_access_token(credentials.credentials, config.secret_key)
    if claims is None or not token_allows_site(claims, site_id):
        return _error(401, INVALID_TOKEN, "The provided token is invalid or expired")

    if site_id != config.identity.site_id:
        return _error(404, "unknown_site", f"Unknown site {site_id}")

    result = resolve_status(config.identity, local_store=repo)
    if isinstance(result, StatusError):
        return JSONResponse(status_code=result.http_status, content=result.to_dict())
    return result.model_dump(mode="json")
