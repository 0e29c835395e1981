import json

import httpx
import pytest

from wetask.client.transport import ApiRequest, AuthTransport


@pytest.fixture
def captured():
    return []


@pytest.fixture
def transport(captured):
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"ok": True})

    return AuthTransport(
        httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://api.test/api/v1")
    )


@pytest.mark.asyncio
async def test_bearer_header_is_added_when_a_token_is_given(transport, captured):
    await transport.send(ApiRequest("GET", "/auth/me"), "T1")

    assert captured[0].headers["Authorization"] == "Bearer T1"
    assert captured[0].url.path == "/api/v1/auth/me"
    await transport.aclose()


@pytest.mark.asyncio
async def test_header_is_omitted_without_a_token(transport, captured):
    await transport.send(ApiRequest("GET", "/auth/me"))

    assert "Authorization" not in captured[0].headers
    await transport.aclose()


@pytest.mark.asyncio
async def test_body_params_and_headers_are_forwarded(transport, captured):
    request = ApiRequest(
        "POST",
        "/tasks",
        json={"title": "Ship it"},
        params={"board": "7"},
        headers={"X-Request-ID": "abc"},
    )

    response = await transport.send(request, "T1")

    sent = captured[0]
    assert response.json() == {"ok": True}
    assert sent.method == "POST"
    assert json.loads(sent.content) == {"title": "Ship it"}
    assert sent.url.params["board"] == "7"
    assert sent.headers["X-Request-ID"] == "abc"
    assert request.headers == {"X-Request-ID": "abc"}
    await transport.aclose()
