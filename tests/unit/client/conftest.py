import httpx
import pytest
import pytest_asyncio

from wetask.client.coordinator import RefreshCoordinator
from wetask.client.token_store import TokenStore
from wetask.client.transport import AuthTransport
from wetask.domain.value_objects.token_pair import TokenPair
from tests.fakes import FakeApi

BASE_URL = "http://api.test/api/v1"


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def token_store():
    store = TokenStore()
    store.set(TokenPair(access_token="T1", refresh_token="R1"))
    return store


@pytest.fixture
def expired_sessions():
    return []


@pytest_asyncio.fixture
async def coordinator(fake_api, token_store, expired_sessions):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api), base_url=BASE_URL)
    coordinator = RefreshCoordinator(
        token_store,
        AuthTransport(client),
        on_session_expired=lambda: expired_sessions.append(True),
    )
    yield coordinator
    await coordinator.aclose()
    await client.aclose()
