from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx

__all__ = ["ApiRequest", "AuthTransport"]


@dataclass(frozen=True)
class ApiRequest:
    """Everything needed to send, and later replay, one API call.

    The access token is deliberately not part of the request: it is attached
    at send time so that a replay picks up the freshly exchanged token.
    """

    method: str
    path: str
    json: Any = None
    params: Optional[Mapping[str, Any]] = None
    headers: Optional[Mapping[str, str]] = None


class AuthTransport:
    """Thin wrapper around :class:`httpx.AsyncClient` that attaches bearer tokens."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def send(self, request: ApiRequest, access_token: Optional[str] = None) -> httpx.Response:
        """Send ``request``, adding ``Authorization: Bearer`` only when a token is given.

        Raises:
            httpx.HTTPError: On connection failures and timeouts. Non-2xx
                statuses are returned, not raised.
        """
        headers = dict(request.headers or {})
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return await self._client.request(
            request.method,
            request.path,
            json=request.json,
            params=request.params,
            headers=headers,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
