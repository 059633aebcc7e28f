"""
Status component.

Public API for resolving membership connection status.
"""

from .component import (
    DECODE_FAILURE_MESSAGE,
    MISSING_TOKEN_MESSAGE,
    REMOTE_UNAVAILABLE_MESSAGE,
    StatusService,
    decode_remote_response,
    get_connected_account_id,
    get_site_id,
    resolve_status,
    run,
    status_path,
)
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

__all__ = [
    # Functions
    "decode_remote_response",
    "get_connected_account_id",
    "get_site_id",
    "resolve_status",
    "run",
    "status_path",
    "StatusService",
    # Messages
    "DECODE_FAILURE_MESSAGE",
    "MISSING_TOKEN_MESSAGE",
    "REMOTE_UNAVAILABLE_MESSAGE",
    # Models
    "DEFAULT_REST_BASE",
    "STATUS_API_VERSION",
    "RemoteResponse",
    "RemoteTransportError",
    "ResolveStatusInput",
    "StatusError",
    "StatusErrorCode",
    "StatusResult",
    # Ports
    "LocalStatusStorePort",
    "RemoteStatusPort",
]
