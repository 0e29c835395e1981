import pytest

REGISTER = {"email": "a@x.com", "password": "secret1", "name": "Ada"}


async def _register(async_client, **overrides):
    return await async_client.post("/api/v1/auth/register", json={**REGISTER, **overrides})


@pytest.mark.asyncio
async def test_register_returns_user_and_camel_case_tokens(async_client):
    # Act
    response = await _register(async_client)

    # Assert
    assert response.status_code == 201
    body = response.json()
    assert set(body) == {"user", "accessToken", "refreshToken"}
    assert body["user"]["email"] == "a@x.com"
    assert body["user"]["name"] == "Ada"
    assert set(body["user"]) == {"id", "email", "name", "createdAt"}


@pytest.mark.asyncio
async def test_register_with_taken_email_conflicts(async_client):
    await _register(async_client)

    response = await _register(async_client, name="Bob")

    assert response.status_code == 409
    assert response.json() == {"detail": "User with this email already exists"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [{"password": "short"}, {"email": "not-an-email"}, {"name": ""}],
)
async def test_register_rejects_invalid_body(async_client, overrides):
    response = await _register(async_client, **overrides)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_returns_a_pair(async_client):
    await _register(async_client)

    response = await async_client.post(
        "/api/v1/auth/login", json={"email": "a@x.com", "password": "secret1"}
    )

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "a@x.com"
    assert response.json()["accessToken"]


@pytest.mark.asyncio
async def test_login_with_wrong_password_is_unauthorized(async_client):
    await _register(async_client)

    response = await async_client.post(
        "/api/v1/auth/login", json={"email": "a@x.com", "password": "wrong!!"}
    )

    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid credentials"}
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_refresh_rotates_and_old_token_is_rejected(async_client):
    refresh_token = (await _register(async_client)).json()["refreshToken"]

    first = await async_client.post("/api/v1/auth/refresh", json={"refreshToken": refresh_token})
    replay = await async_client.post("/api/v1/auth/refresh", json={"refreshToken": refresh_token})

    assert first.status_code == 200
    assert set(first.json()) == {"accessToken", "refreshToken"}
    assert first.json()["refreshToken"] != refresh_token
    assert replay.status_code == 401
    assert replay.json() == {"detail": "Invalid or expired refresh token"}


@pytest.mark.asyncio
async def test_logout_revokes_refresh_token(async_client):
    refresh_token = (await _register(async_client)).json()["refreshToken"]

    response = await async_client.post("/api/v1/auth/logout", json={"refreshToken": refresh_token})
    refresh = await async_client.post("/api/v1/auth/refresh", json={"refreshToken": refresh_token})

    assert response.status_code == 204
    assert response.content == b""
    assert refresh.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_current_user(async_client):
    access_token = (await _register(async_client)).json()["accessToken"]

    response = await async_client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {access_token}"}
    )

    assert response.status_code == 200
    assert response.json()["email"] == "a@x.com"
    assert "createdAt" in response.json()


@pytest.mark.asyncio
@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer garbage"}])
async def test_me_requires_a_valid_bearer_token(async_client, headers):
    response = await async_client.get("/api/v1/auth/me", headers=headers)

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
