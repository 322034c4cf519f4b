"""
cutclient/
----------
Client for the cut backend.

    from cutclient import BackendClient, BackendError
"""

from cutclient.http import (
    DEFAULT_TIMEOUT,
    BackendClient,
    BackendError,
    BackendPayloadError,
    BackendStatusError,
    BackendTransportError,
)

__all__ = [
    "DEFAULT_TIMEOUT",
    "BackendClient",
    "BackendError",
    "BackendPayloadError",
    "BackendStatusError",
    "BackendTransportError",
]
