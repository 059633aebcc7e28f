"""
Status component - membership connection status.

Resolves the site's connection status from the local authoritative store
or, for connected clients, from the remote status endpoint.

Invariants:
- Exactly one of ConnectionStatus or StatusError is returned per call
- No caching; every call re-resolves
- The remote path makes a single request with no retry
"""

from __future__ import annotations

import json
import logging
from typing import Any, assert_never

from pydantic import ValidationError

from memberships.domain.entities import ConnectionStatus, DeploymentMode, SiteIdentity
from memberships.rules.models import Rules

from .models import (
    DEFAULT_REST_BASE,
    STATUS_API_VERSION,
    RemoteResponse,
    RemoteTransportError,
    ResolveStatusInput,
    StatusError,
    StatusErrorCode,
    StatusResult,
)
from .ports import LocalStatusStorePort, RemoteStatusPort

logger = logging.getLogger(__name__)

MISSING_TOKEN_MESSAGE = "Please connect your user account to the memberships service"
REMOTE_UNAVAILABLE_MESSAGE = "Could not connect to the memberships service"
DECODE_FAILURE_MESSAGE = "Unexpected response from the memberships service"


def status_path(site_id: int, rest_base: str = DEFAULT_REST_BASE) -> str:
    """Remote endpoint path for a site's status."""
    return f"/sites/{site_id}/{rest_base}/status"


# --- Decoding ---


def _structured_error(data: Any) -> StatusError | None:
    """Remote {code, message} error body, if present."""
    if not isinstance(data, dict):
        return None
    code = data.get("code")
    message = data.get("message")
    if isinstance(code, str) and code and isinstance(message, str) and message:
        return StatusError(code=code, message=message, http_status=401)
    return None


def decode_remote_response(response: RemoteResponse) -> StatusResult:
    """
    Decode a remote status response.

    Non-2xx responses surface their {code, message} body; anything the
    remote sends that does not match the status shape is a decode failure.
    """
    decode_failure = StatusError(
        code=StatusErrorCode.DECODE_FAILURE, message=DECODE_FAILURE_MESSAGE
    )

    data: Any = None
    if response.body:
        try:
            data = json.loads(response.body)
        except ValueError:
            data = None

    if not response.is_success:
        remote_error = _structured_error(data)
        if remote_error is not None:
            return remote_error
        logger.warning(f"Remote status returned {response.status_code} without an error body")
        return decode_failure

    if not isinstance(data, dict):
        logger.warning("Remote status body is not a JSON object")
        return decode_failure

    try:
        return ConnectionStatus.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Remote status body failed validation: {e.error_count()} errors")
        return decode_failure


# --- Resolution ---


def _resolve_local(site_id: int, local_store: LocalStatusStorePort) -> StatusResult:
    status = local_store.get_status(site_id)
    if status is None:
        logger.debug(f"No stored membership status for site {site_id}, using defaults")
        return ConnectionStatus()
    return status


def _resolve_remote(
    site_id: int,
    remote_client: RemoteStatusPort,
    rest_base: str,
    timeout: float | None,
) -> StatusResult:
    try:
        response = remote_client.request_as_user(
            status_path(site_id, rest_base),
            version=STATUS_API_VERSION,
            timeout=timeout,
        )
    except RemoteTransportError as e:
        if e.code == StatusErrorCode.MISSING_TOKEN.value:
            return StatusError(code=StatusErrorCode.MISSING_TOKEN, message=MISSING_TOKEN_MESSAGE)
        logger.warning(f"Remote status request failed: {e.code} {e.message}")
        return StatusError(
            code=StatusErrorCode.REMOTE_UNAVAILABLE, message=REMOTE_UNAVAILABLE_MESSAGE
        )

    return decode_remote_response(response)


def resolve_status(
    identity: SiteIdentity,
    *,
    local_store: LocalStatusStorePort | None = None,
    remote_client: RemoteStatusPort | None = None,
    rest_base: str = DEFAULT_REST_BASE,
    timeout: float | None = None,
) -> StatusResult:
    """
    Resolve membership connection status for a site.

    Args:
        identity: Site identity; its deployment mode selects the source
        local_store: Authoritative store (required in authoritative mode)
        remote_client: Remote status client (required for connected clients)
        rest_base: REST route base of the remote status endpoint
        timeout: Seconds before the remote request is abandoned

    Returns:
        ConnectionStatus, or StatusError describing why it is unavailable
    """
    match identity.deployment_mode:
        case DeploymentMode.AUTHORITATIVE:
            if local_store is None:
                raise ValueError("Authoritative status resolution requires a local store")
            return _resolve_local(identity.site_id, local_store)
        case DeploymentMode.CONNECTED_CLIENT:
            if remote_client is None:
                raise ValueError("Connected client status resolution requires a remote client")
            return _resolve_remote(identity.site_id, remote_client, rest_base, timeout)
        case _:
            assert_never(identity.deployment_mode)


def get_site_id(rules: Rules, mode: DeploymentMode) -> int:
    """
    Site id used for status and entitlement lookups.

    Authoritative deployments use their own site id. Connected clients use
    the id assigned by the authoritative backend at connection time, falling
    back to the local id when none was stored.
    """
    match mode:
        case DeploymentMode.AUTHORITATIVE:
            return rules.site.site_id
        case DeploymentMode.CONNECTED_CLIENT:
            if rules.site.connected_site_id is not None:
                return rules.site.connected_site_id
            return rules.site.site_id
        case _:
            assert_never(mode)


def get_connected_account_id(site_id: int, local_store: LocalStatusStorePort) -> str | None:
    """Id of the payment account connected to the site, if any."""
    return local_store.get_connected_account_id(site_id)


# --- Service ---


class StatusService:
    """Status resolver with its collaborators injected once."""

    def __init__(
        self,
        local_store: LocalStatusStorePort | None = None,
        remote_client: RemoteStatusPort | None = None,
        rest_base: str = DEFAULT_REST_BASE,
        timeout: float | None = None,
    ) -> None:
        self._local_store = local_store
        self._remote_client = remote_client
        self._rest_base = rest_base
        self._timeout = timeout

    def resolve(self, identity: SiteIdentity, timeout: float | None = None) -> StatusResult:
        return resolve_status(
            identity,
            local_store=self._local_store,
            remote_client=self._remote_client,
            rest_base=self._rest_base,
            timeout=timeout if timeout is not None else self._timeout,
        )


# --- Run Function (Atomic Component Pattern) ---


def run(
    input_data: ResolveStatusInput,
    local_store: LocalStatusStorePort | None = None,
    remote_client: RemoteStatusPort | None = None,
) -> StatusResult:
    """Atomic component entry point."""
    return resolve_status(
        input_data.identity,
        local_store=local_store,
        remote_client=remote_client,
        rest_base=input_data.rest_base,
        timeout=input_data.timeout,
    )
