"""In-memory repository ports and a scriptable HTTP API for tests."""

import asyncio
import json
from datetime import datetime
from typing import Dict, Optional

import httpx

from wetask.core.exceptions import EmailTakenError
from wetask.domain.entities.refresh_token import RefreshToken
from wetask.domain.entities.user import User
from wetask.domain.interfaces.repositories import IRefreshTokenRepository, IUserRepository


class InMemoryUserRepository(IUserRepository):
    def __init__(self):
        self.users: Dict[int, User] = {}
        self._next_id = 1

    async def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        email = email.lower()
        return next((u for u in self.users.values() if u.email == email), None)

    async def add(self, user: User) -> User:
        if await self.get_by_email(user.email) is not None:
            raise EmailTakenError()
        user.id = self._next_id
        self._next_id += 1
        self.users[user.id] = user
        return user


class InMemoryRefreshTokenRepository(IRefreshTokenRepository):
    def __init__(self):
        self.tokens: Dict[str, RefreshToken] = {}
        self.consumed = 0
        self._next_id = 1

    async def add(self, user_id: int, token_hash: str, expires_at: datetime) -> RefreshToken:
        token = RefreshToken(
            id=self._next_id,
            user_id=user_id,
            token_hash=token_hash,
            expires_at=expires_at,
        )
        self._next_id += 1
        self.tokens[token_hash] = token
        return token

    async def consume(self, token_hash: str) -> Optional[RefreshToken]:
        token = self.tokens.pop(token_hash, None)
        if token is not None:
            self.consumed += 1
        return token

    async def revoke(self, token_hash: str) -> bool:
        return self.tokens.pop(token_hash, None) is not None


class FakeApi:
    """Scriptable stand-in for the WeTask API behind an ``httpx.MockTransport``.

    Protected paths answer ``200`` only for ``valid_token``. The refresh
    endpoint waits on ``refresh_gate`` so tests can hold an exchange in flight.
    """

    def __init__(self):
        self.valid_token = "T2"
        self.refresh_status = 200
        self.refresh_body = {"accessToken": "T2", "refreshToken": "R2"}
        self.refresh_error = None
        self.refresh_gate = asyncio.Event()
        self.refresh_gate.set()
        self.slow_gate = asyncio.Event()
        self.slow_gate.set()
        self.refresh_calls = []
        self.calls = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/auth/refresh"):
            self.refresh_calls.append(json.loads(request.content))
            await self.refresh_gate.wait()
            if self.refresh_error is not None:
                raise self.refresh_error(request)
            return httpx.Response(self.refresh_status, json=self.refresh_body)

        header = request.headers.get("Authorization", "")
        token = header[len("Bearer "):] if header.startswith("Bearer ") else None
        self.calls.append((request.url.path.rsplit("/", 1)[-1], token))
        if request.url.path.endswith("/slow"):
            await self.slow_gate.wait()
        if token != self.valid_token:
            return httpx.Response(401, json={"detail": "Invalid token"})
        return httpx.Response(200, json={"path": request.url.path})

    def replays(self, token):
        return [name for name, sent in self.calls if sent == token]


async def wait_until(predicate, attempts=500):
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0.001)
    raise AssertionError("condition was not reached")
