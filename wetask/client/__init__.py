"""Session client for the WeTask API.

Callers talk to :class:`ApiClient`. Every authenticated call goes through a
:class:`RefreshCoordinator`, which turns a storm of ``401`` responses into a
single refresh-token exchange and replays the failed calls in order.
"""

from wetask.client.api_client import ApiClient
from wetask.client.coordinator import PendingRequest, RefreshCoordinator, RefreshState
from wetask.client.token_store import TokenStore
from wetask.client.transport import ApiRequest, AuthTransport

__all__ = [
    "ApiClient",
    "ApiRequest",
    "AuthTransport",
    "PendingRequest",
    "RefreshCoordinator",
    "RefreshState",
    "TokenStore",
]
