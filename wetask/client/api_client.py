from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

import httpx
from structlog import get_logger

from wetask.client.coordinator import RefreshCoordinator
from wetask.client.token_store import TokenStore
from wetask.client.transport import ApiRequest, AuthTransport
from wetask.core.config.client import ClientSettings
from wetask.core.exceptions import ApiError
from wetask.domain.value_objects.token_pair import TokenPair

__all__ = ["ApiClient"]

logger = get_logger(__name__)


class ApiClient:
    """High-level client for the WeTask API.

    Authenticated calls go through the :class:`RefreshCoordinator`, so an
    expired access token is refreshed and the call replayed without the
    caller noticing. Sign-in and sign-up talk to the transport directly and
    open the session on success.

    Example::

        async with ApiClient.from_settings() as api:
            await api.sign_in("a@x.com", "secret1")
            me = await api.get_current_user()
    """

    def __init__(self, coordinator: RefreshCoordinator):
        self.coordinator = coordinator

    @classmethod
    def from_settings(
        cls,
        settings: Optional[ClientSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        on_session_expired: Optional[Callable[[], Any]] = None,
    ) -> "ApiClient":
        settings = settings or ClientSettings()
        if http_client is None:
            http_client = httpx.AsyncClient(
                base_url=settings.API_BASE_URL,
                timeout=settings.REQUEST_TIMEOUT_SECONDS,
            )
        coordinator = RefreshCoordinator(
            TokenStore(settings.TOKEN_STORE_PATH),
            AuthTransport(http_client),
            refresh_path=settings.REFRESH_PATH,
            on_session_expired=on_session_expired,
        )
        return cls(coordinator)

    @property
    def store(self) -> TokenStore:
        return self.coordinator.store

    @property
    def is_authenticated(self) -> bool:
        return self.store.get() is not None

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        auth: bool = True,
    ) -> Any:
        """Send a request and return its decoded JSON body (``None`` for empty bodies).

        Raises:
            ApiError: For any non-2xx response that the coordinator did not
                recover from.
            SessionExpiredError: If the session expired and could not be refreshed.
        """
        api_request = ApiRequest(method.upper(), path, json=json, params=params, headers=headers)
        if auth:
            response = await self.coordinator.request_with_auth(api_request)
        else:
            response = await self.coordinator.transport.send(api_request)
        return self._decode(response)

    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """Log in and open a session. Returns the user payload."""
        data = await self.request(
            "POST", "/auth/login", json={"email": email, "password": password}, auth=False
        )
        self.coordinator.start_session(TokenPair.model_validate(data))
        return data["user"]

    async def sign_up(self, email: str, password: str, name: str) -> Dict[str, Any]:
        """Register a new account and open a session. Returns the user payload."""
        data = await self.request(
            "POST",
            "/auth/register",
            json={"email": email, "password": password, "name": name},
            auth=False,
        )
        self.coordinator.start_session(TokenPair.model_validate(data))
        return data["user"]

    async def logout(self) -> None:
        """Revoke the refresh token server-side and end the local session.

        The local session is always ended, even when the server cannot be
        reached or rejects the revocation.
        """
        pair = self.store.get()
        try:
            if pair is not None:
                await self.request(
                    "POST", "/auth/logout", json={"refreshToken": pair.refresh_token}, auth=False
                )
        except (ApiError, httpx.HTTPError) as exc:
            logger.warning("logout_request_failed", error=str(exc))
        finally:
            self.coordinator.end_session()

    async def get_current_user(self) -> Dict[str, Any]:
        return await self.request("GET", "/auth/me")

    async def aclose(self) -> None:
        await self.coordinator.aclose()
        await self.coordinator.transport.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.is_success:
            raise ApiError(response.status_code, _error_message(response))
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        return response.json()


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        for key in ("detail", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, list) and value:
                # FastAPI request validation errors
                first = value[0]
                if isinstance(first, dict) and first.get("msg"):
                    return str(first["msg"])
    return None
