"""End-to-end: the session client against the real application.

The app runs in-process through ``httpx.ASGITransport`` with in-memory
repositories, so every request goes through routing, validation, the
exception handlers and the auth service exactly as in production.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio

from wetask.client.api_client import ApiClient
from wetask.core.config.client import ClientSettings
from wetask.core.exceptions import ApiError, SessionExpiredError
from wetask.domain.value_objects.token_pair import TokenPair

BASE_URL = "http://test/api/v1"


@pytest.fixture
def expired_sessions():
    return []


@pytest_asyncio.fixture
async def api(app, expired_sessions):
    client = ApiClient.from_settings(
        ClientSettings(API_BASE_URL=BASE_URL, TOKEN_STORE_PATH=None),
        http_client=httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=BASE_URL),
        on_session_expired=lambda: expired_sessions.append(True),
    )
    async with client:
        yield client


def _expire_access_token(api, token_service, user_repository):
    """Swap the session's access token for one that expired an hour ago."""
    current = api.store.get()
    user = next(iter(user_repository.users.values()))
    stale = token_service.create_access_token(
        user, now=datetime.now(timezone.utc) - timedelta(hours=1)
    )
    api.coordinator.start_session(
        TokenPair(access_token=stale, refresh_token=current.refresh_token)
    )


@pytest.mark.asyncio
async def test_expired_access_token_is_refreshed_transparently(
    api, token_service, user_repository, refresh_token_repository
):
    # Arrange
    await api.sign_up("a@x.com", "secret1", "Ada")
    _expire_access_token(api, token_service, user_repository)
    stale_pair = api.store.get()

    # Act
    me = await api.get_current_user()

    # Assert
    assert me["email"] == "a@x.com"
    assert api.store.get().refresh_token != stale_pair.refresh_token
    assert refresh_token_repository.consumed == 1


@pytest.mark.asyncio
async def test_burst_of_requests_survives_expiry_with_one_exchange(
    api, token_service, user_repository, refresh_token_repository
):
    await api.sign_up("a@x.com", "secret1", "Ada")
    _expire_access_token(api, token_service, user_repository)

    results = await asyncio.gather(*(api.get_current_user() for _ in range(5)))

    # A second exchange would have presented an already consumed token and failed.
    assert [r["name"] for r in results] == ["Ada"] * 5
    assert refresh_token_repository.consumed == 1


@pytest.mark.asyncio
async def test_revoked_session_fails_closed(
    api, auth_service, token_service, user_repository, expired_sessions
):
    await api.sign_up("a@x.com", "secret1", "Ada")
    _expire_access_token(api, token_service, user_repository)
    stale_pair = api.store.get()
    await auth_service.logout(stale_pair.refresh_token)

    with pytest.raises(SessionExpiredError):
        await api.get_current_user()

    assert api.store.get() is None
    assert expired_sessions == [True]


@pytest.mark.asyncio
async def test_sign_in_after_logout_starts_a_new_session(api):
    await api.sign_up("a@x.com", "secret1", "Ada")
    await api.logout()

    with pytest.raises(ApiError) as exc_info:
        await api.sign_in("a@x.com", "wrong!!")
    await api.sign_in("a@x.com", "secret1")

    assert exc_info.value.status_code == 401
    assert (await api.get_current_user())["name"] == "Ada"
