import os

# Settings are read once at import time; configure them before importing wetask.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_JSON", "false")

import httpx
import pytest
import pytest_asyncio

from wetask.core.application import create_application
from wetask.domain.services.auth.auth_service import AuthService
from wetask.domain.services.auth.token import TokenService
from wetask.infrastructure.dependency_injection.auth_dependencies import get_auth_service
from tests.fakes import InMemoryRefreshTokenRepository, InMemoryUserRepository


@pytest.fixture
def user_repository():
    return InMemoryUserRepository()


@pytest.fixture
def refresh_token_repository():
    return InMemoryRefreshTokenRepository()


@pytest.fixture
def token_service():
    return TokenService()


@pytest.fixture
def auth_service(user_repository, refresh_token_repository, token_service):
    return AuthService(
        users=user_repository,
        refresh_tokens=refresh_token_repository,
        token_service=token_service,
    )


@pytest.fixture
def app(auth_service):
    """The real application with repositories swapped for in-memory fakes."""
    application = create_application()
    application.dependency_overrides[get_auth_service] = lambda: auth_service
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
