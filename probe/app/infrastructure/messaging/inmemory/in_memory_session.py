"""In-memory broker session for testing and local mode.

Simulates a broker that rejects publishes to the reserved subject namespace: the
rejection is reported asynchronously, after flush, through the observer and the
session's last error, the same way a live broker's permission violation arrives.
`error_delay_seconds` delays that delivery so callers can exercise late errors.
"""
from __future__ import annotations

import asyncio

from probe.app.constants import SessionState, is_reserved_subject
from probe.app.domain.models import AsyncErrorEvent, Message
from probe.app.ports.broker_session import SessionConnectError, SessionPublishError
from probe.app.ports.error_observer import ErrorObserver

_LIVE_STATES = (SessionState.CONNECTED, SessionState.FAULTED)


class InMemorySession:
    def __init__(
        self,
        *,
        name: str = "inmemory",
        enforce_reserved: bool = True,
        error_delay_seconds: float = 0.0,
        connect_error: Exception | None = None,
    ) -> None:
        self._name = name
        self._enforce_reserved = enforce_reserved
        self._error_delay_seconds = error_delay_seconds
        self._connect_error = connect_error
        self._state = SessionState.DISCONNECTED
        self._observer: ErrorObserver | None = None
        self._last_error: str | None = None
        self._pending: list[Message] = []
        self._deliveries: set[asyncio.Task[None]] = set()
        self.published: list[Message] = []
        self.flushed: list[Message] = []
        self.calls: list[str] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def last_error(self) -> str | None:
        return self._last_error

    async def connect(self, observer: ErrorObserver) -> None:
        self.calls.append("connect")
        if self._state != SessionState.DISCONNECTED:
            raise RuntimeError("session_already_connected")
        self._state = SessionState.CONNECTING
        if self._connect_error is not None:
            self._state = SessionState.DISCONNECTED
            raise SessionConnectError(str(self._connect_error)) from self._connect_error
        self._observer = observer
        self._state = SessionState.CONNECTED

    async def publish(self, message: Message) -> None:
        self.calls.append("publish")
        if self._state not in _LIVE_STATES:
            raise SessionPublishError("session_not_connected")
        self.published.append(message)
        self._pending.append(message)

    async def flush(self, timeout: float) -> None:
        self.calls.append("flush")
        if self._state not in _LIVE_STATES:
            raise RuntimeError("session_not_connected")
        pending, self._pending = self._pending, []
        for message in pending:
            self.flushed.append(message)
            if self._enforce_reserved and is_reserved_subject(message.subject):
                task = asyncio.create_task(self._reject(message))
                self._deliveries.add(task)
                task.add_done_callback(self._deliveries.discard)

    async def _reject(self, message: Message) -> None:
        if self._error_delay_seconds > 0:
            await asyncio.sleep(self._error_delay_seconds)
        if self._state not in _LIVE_STATES or self._observer is None:
            return
        error = PermissionError(f'nats: permissions violation for publish to "{message.subject}"')
        self._last_error = str(error)
        self._state = SessionState.FAULTED
        await self._observer.on_async_error(
            AsyncErrorEvent.from_exception(error, connection=self._name)
        )

    async def close(self) -> None:
        self.calls.append("close")
        if self._state == SessionState.CLOSED:
            return
        self._state = SessionState.CLOSING
        for task in list(self._deliveries):
            task.cancel()
        if self._deliveries:
            await asyncio.gather(*self._deliveries, return_exceptions=True)
        self._state = SessionState.CLOSED
