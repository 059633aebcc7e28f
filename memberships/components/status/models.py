"""
Status component input/output models.

Status resolution produces either a ConnectionStatus or a StatusError,
never both.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from memberships.domain.entities import ConnectionStatus, SiteIdentity

DEFAULT_REST_BASE = "memberships"
STATUS_API_VERSION = "v2"


class StatusErrorCode(str, Enum):
    """Error codes produced by the resolver itself."""

    MISSING_TOKEN = "missing_token"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    DECODE_FAILURE = "decode_failure"


# --- Errors ---


@dataclass(frozen=True)
class StatusError:
    """
    Typed status resolution error.

    Attributes:
        code: A StatusErrorCode, or the code string supplied by the remote service
        message: Human readable message for the settings surface
        http_status: Status to use when the error is returned over HTTP
    """

    code: StatusErrorCode | str
    message: str
    http_status: int = 404

    @property
    def code_value(self) -> str:
        return self.code.value if isinstance(self.code, StatusErrorCode) else self.code

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code_value, "message": self.message}


class RemoteTransportError(Exception):
    """Raised by remote adapters when the request could not complete."""

    def __init__(self, code: str, message: str = "") -> None:
        super().__init__(message or code)
        self.code = code
        self.message = message


# --- Remote Response ---


@dataclass(frozen=True)
class RemoteResponse:
    """Raw response from the remote status endpoint."""

    status_code: int
    body: str | None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


# --- Input/Output ---


@dataclass(frozen=True)
class ResolveStatusInput:
    """Input for resolving connection status."""

    identity: SiteIdentity
    rest_base: str = DEFAULT_REST_BASE
    timeout: float | None = None


StatusResult = ConnectionStatus | StatusError
