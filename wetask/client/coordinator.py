"""Refresh coordination for authenticated API calls.

Access tokens are short lived. When one expires, every call in flight comes
back ``401`` at roughly the same moment. :class:`RefreshCoordinator` makes
sure that such a storm produces exactly one refresh-token exchange:

* The first ``401`` seen while ``idle`` queues its caller, flips the state to
  ``refreshing`` and starts the exchange.
* Every further ``401`` while ``refreshing`` only queues its caller.
* When the exchange succeeds the new pair is stored and the queued calls are
  replayed one after the other, oldest first, each with the new access token.
* When it fails the store is cleared, every queued caller gets
  :class:`SessionExpiredError` and the ``on_session_expired`` hook fires.

The state check and the transition happen without an ``await`` in between,
which is all the mutual exclusion a single event loop needs.
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Deque, Optional, Set

import httpx
from structlog import get_logger

from wetask.client.token_store import TokenStore
from wetask.client.transport import ApiRequest, AuthTransport
from wetask.core.exceptions import SessionExpiredError
from wetask.domain.value_objects.token_pair import TokenPair

__all__ = ["RefreshState", "PendingRequest", "RefreshCoordinator"]

logger = get_logger(__name__)


class RefreshState(str, Enum):
    IDLE = "idle"
    REFRESHING = "refreshing"


@dataclass
class PendingRequest:
    """A caller parked until the running exchange settles."""

    request: ApiRequest
    future: asyncio.Future[httpx.Response]


class RefreshCoordinator:
    """Single-flight refresh of the session's token pair.

    This object is the only writer of its :class:`TokenStore`; callers open
    and close sessions through :meth:`start_session` and :meth:`end_session`.
    It must be used from one event loop.

    Attributes:
        store (TokenStore): Where the current pair lives.
        transport (AuthTransport): Sends requests and the exchange itself.
        refresh_path (str): Path of the refresh endpoint, relative to the
            transport's base URL.
    """

    def __init__(
        self,
        store: TokenStore,
        transport: AuthTransport,
        refresh_path: str = "/auth/refresh",
        on_session_expired: Optional[Callable[[], Any]] = None,
    ):
        self.store = store
        self.transport = transport
        self.refresh_path = refresh_path
        self._on_session_expired = on_session_expired
        self._state = RefreshState.IDLE
        self._queue: Deque[PendingRequest] = deque()
        # Bumped whenever the session is replaced or ended, so an exchange
        # started for an older session cannot settle into the new one.
        self._generation = 0
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> RefreshState:
        return self._state

    @property
    def queued(self) -> int:
        return len(self._queue)

    def start_session(self, pair: TokenPair) -> None:
        """Store the pair returned by sign-in or sign-up."""
        self._invalidate_storm()
        self.store.set(pair)

    def end_session(self) -> None:
        """Forget the current session.

        If an exchange is running its result is discarded and the callers
        waiting on it are rejected with :class:`SessionExpiredError`.
        """
        self._invalidate_storm()
        self.store.clear()

    async def request_with_auth(self, request: ApiRequest) -> httpx.Response:
        """Send ``request`` with the current access token, refreshing on ``401``.

        Returns:
            httpx.Response: The response of the original call, or of its single
            replay after a successful exchange. A replay that is answered with
            ``401`` again is returned as is.

        Raises:
            SessionExpiredError: If the session could not be refreshed.
            httpx.HTTPError: If the transport itself fails.
        """
        sent_token = self._access_token()
        response = await self.transport.send(request, sent_token)
        if response.status_code != httpx.codes.UNAUTHORIZED:
            return response

        if self._state is RefreshState.IDLE:
            current_token = self._access_token()
            if sent_token and current_token and current_token != sent_token:
                # An exchange settled while this call was in flight.
                logger.debug("replaying_with_rotated_token", path=request.path)
                return await self.transport.send(request, current_token)

        return await self._enqueue(request)

    async def aclose(self) -> None:
        """Cancel any running exchange or replay and reject its callers."""
        self._invalidate_storm()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _enqueue(self, request: ApiRequest) -> httpx.Response:
        pending = PendingRequest(request, asyncio.get_running_loop().create_future())
        self._queue.append(pending)
        if self._state is RefreshState.IDLE:
            self._state = RefreshState.REFRESHING
            task = asyncio.create_task(self._run_refresh(self._generation))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        return await pending.future

    async def _run_refresh(self, generation: int) -> None:
        batch: Deque[PendingRequest] = deque()
        try:
            pair = await self._exchange()
            batch = self._settle_exchange(generation, pair)
            while batch:
                if generation != self._generation:
                    # Session ended or replaced mid-drain; the rest must not
                    # be sent with the old access token.
                    self._reject(batch)
                    break
                pending = batch.popleft()
                if pending.future.done():
                    continue
                await self._replay(pending, pair.access_token)
        except asyncio.CancelledError:
            self._reject(batch)
            raise

    async def _exchange(self) -> Optional[TokenPair]:
        """Trade the stored refresh token for a new pair; ``None`` on any failure."""
        current = self.store.get()
        if current is None or not current.refresh_token:
            logger.info("refresh_skipped", reason="no_refresh_token")
            return None

        exchange = ApiRequest("POST", self.refresh_path, json={"refreshToken": current.refresh_token})
        try:
            response = await self.transport.send(exchange)
        except httpx.HTTPError as exc:
            logger.warning("refresh_failed", reason="transport_error", error=str(exc))
            return None
        except Exception:
            logger.exception("refresh_failed", reason="unexpected_error")
            return None
        if not response.is_success:
            logger.info("refresh_rejected", status_code=response.status_code)
            return None
        try:
            return TokenPair.model_validate(response.json())
        except ValueError as exc:
            logger.warning("refresh_failed", reason="malformed_response", error=str(exc))
            return None

    def _settle_exchange(
        self, generation: int, pair: Optional[TokenPair]
    ) -> Deque[PendingRequest]:
        """Apply an exchange outcome and hand back the callers to replay.

        Runs without awaiting, so the store update, the state change and
        taking the queue are seen by other tasks as one step.
        """
        if generation != self._generation:
            logger.info("refresh_result_discarded")
            return deque()

        self._state = RefreshState.IDLE
        batch, self._queue = self._queue, deque()
        if pair is None:
            self.store.clear()
            self._reject(batch)
            logger.info("session_expired", rejected=len(batch))
            self._notify_session_expired()
            return deque()

        self.store.set(pair)
        logger.info("session_refreshed", replaying=len(batch))
        return batch

    async def _replay(self, pending: PendingRequest, access_token: str) -> None:
        try:
            response = await self.transport.send(pending.request, access_token)
        except asyncio.CancelledError:
            if not pending.future.done():
                pending.future.set_exception(SessionExpiredError())
            raise
        except Exception as exc:
            if not pending.future.done():
                pending.future.set_exception(exc)
        else:
            if not pending.future.done():
                pending.future.set_result(response)

    def _invalidate_storm(self) -> None:
        self._generation += 1
        if self._state is RefreshState.REFRESHING:
            self._state = RefreshState.IDLE
            batch, self._queue = self._queue, deque()
            self._reject(batch)

    @staticmethod
    def _reject(batch: Deque[PendingRequest]) -> None:
        while batch:
            pending = batch.popleft()
            if not pending.future.done():
                pending.future.set_exception(SessionExpiredError())

    def _notify_session_expired(self) -> None:
        if self._on_session_expired is None:
            return
        try:
            self._on_session_expired()
        except Exception:
            logger.exception("session_expired_hook_failed")

    def _access_token(self) -> Optional[str]:
        pair = self.store.get()
        return pair.access_token if pair else None
