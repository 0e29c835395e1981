import httpx
import pytest
from fastapi import FastAPI

from wetask.core.exceptions import (
    DatabaseError,
    InvalidRefreshTokenError,
    PasswordPolicyError,
    WetaskError,
)
from wetask.core.handlers import register_exception_handlers
from wetask.core.middleware import REQUEST_ID_HEADER


@pytest.fixture
def failing_app():
    app = FastAPI()
    register_exception_handlers(app)

    errors = {
        "refresh": InvalidRefreshTokenError(),
        "policy": PasswordPolicyError("Password must be at least 6 characters long"),
        "database": DatabaseError("connection to 10.0.0.5 refused"),
        "generic": WetaskError("something odd", "odd"),
    }

    @app.get("/fail/{kind}")
    async def fail(kind: str):
        raise errors[kind]

    return app


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kind, status_code, detail",
    [
        ("refresh", 401, "Invalid or expired refresh token"),
        ("policy", 400, "Password must be at least 6 characters long"),
        ("database", 500, "A database error occurred."),
        ("generic", 500, "An unexpected error occurred."),
    ],
)
async def test_exceptions_map_to_status_codes(failing_app, kind, status_code, detail):
    transport = httpx.ASGITransport(app=failing_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get(f"/fail/{kind}")

    assert response.status_code == status_code
    assert response.json() == {"detail": detail}


@pytest.mark.asyncio
async def test_request_id_is_echoed_back(async_client):
    response = await async_client.get("/api/v1/auth/me", headers={REQUEST_ID_HEADER: "req-123"})

    assert response.headers[REQUEST_ID_HEADER] == "req-123"


@pytest.mark.asyncio
async def test_request_id_is_generated_when_missing(async_client):
    response = await async_client.get("/api/v1/auth/me")

    assert len(response.headers[REQUEST_ID_HEADER]) == 36
