"""
Remote status client adapter.

Issues authenticated GET requests against the authoritative backend's
REST API on behalf of the connected user. Satisfies RemoteStatusPort.
"""

from __future__ import annotations

import logging

import httpx

from memberships.components.status import RemoteResponse, RemoteTransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class HttpxRemoteStatusClient:
    """
    RemoteStatusPort backed by httpx.

    A missing user token fails fast without touching the network. Every
    call makes exactly one request.
    """

    def __init__(
        self,
        base_url: str,
        user_token: str | None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.user_token = user_token
        self.timeout = timeout
        self._transport = transport

    def build_url(self, path: str, version: str = "v2") -> str:
        return f"{self.base_url}/{version}/{path.lstrip('/')}"

    def request_as_user(
        self,
        path: str,
        version: str = "v2",
        timeout: float | None = None,
    ) -> RemoteResponse:
        if not self.user_token:
            raise RemoteTransportError("missing_token", "No user token configured")

        url = self.build_url(path, version)
        headers = {
            "Authorization": f"Bearer {self.user_token}",
            "Accept": "application/json",
        }
        effective_timeout = timeout if timeout is not None else self.timeout

        try:
            with httpx.Client(
                timeout=effective_timeout, transport=self._transport
            ) as client:
                response = client.get(url, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"Remote status request to {url} timed out: {e}")
            raise RemoteTransportError("timeout", str(e)) from e
        except httpx.HTTPError as e:
            logger.warning(f"Remote status request to {url} failed: {e}")
            raise RemoteTransportError("connection_error", str(e)) from e

        logger.debug(f"Remote status {url} -> {response.status_code}")
        return RemoteResponse(status_code=response.status_code, body=response.text)
