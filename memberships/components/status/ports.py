"""
Status component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from memberships.domain.entities import ConnectionStatus

from .models import RemoteResponse


class LocalStatusStorePort(Protocol):
    """Authoritative status store, keyed by site id."""

    def get_status(self, site_id: int) -> ConnectionStatus | None:
        """Get stored status, or None if the site has no record."""
        ...

    def get_connected_account_id(self, site_id: int) -> str | None:
        """Get the connected payment account id, if any."""
        ...


class RemoteStatusPort(Protocol):
    """Client for the remote status endpoint."""

    def request_as_user(
        self,
        path: str,
        version: str = "v2",
        timeout: float | None = None,
    ) -> RemoteResponse:
        """
        Issue an authenticated GET as the connected user.

        Args:
            path: Endpoint path, e.g. /sites/1/memberships/status
            version: API version
            timeout: Seconds before the request is abandoned

        Returns:
            RemoteResponse with status code and raw body

        Raises:
            RemoteTransportError: when no response was received, with code
                "missing_token" when the user credential is absent
        """
        ...
