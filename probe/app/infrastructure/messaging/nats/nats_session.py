"""
NATS session: one client connection with an asynchronous error observer.

Lifecycle:
  DISCONNECTED -> CONNECTING -> CONNECTED -> (FAULTED)? -> CLOSING -> CLOSED.
  A failed connect returns to DISCONNECTED and raises SessionConnectError; there is no
  retry and reconnects are disabled on the client.

Callbacks:
  - nats-py invokes error_cb from its reading task, and also while a connect attempt is
    failing. Errors are forwarded to the observer only while CONNECTED or FAULTED, so
    the observer never sees anything before the connection is up or after close().
  - disconnected_cb and closed_cb only log.
"""
from __future__ import annotations

import asyncio
from typing import Any

import nats
from loguru import logger
from nats import errors as nats_errors
from nats.aio.client import Client as NatsClient

from probe.app.config.settings import Settings
from probe.app.constants import SessionState
from probe.app.core import SERVICE_NAME
from probe.app.domain.models import AsyncErrorEvent, Message
from probe.app.ports.broker_session import SessionConnectError, SessionFlushError, SessionPublishError
from probe.app.ports.error_observer import ErrorObserver

_LIVE_STATES = (SessionState.CONNECTED, SessionState.FAULTED)


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class NatsSession:
    """BrokerSession implementation"""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._state = SessionState.DISCONNECTED
        self._client: NatsClient | None = None
        self._observer: ErrorObserver | None = None
        self._closing = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def last_error(self) -> str | None:
        if self._client is None:
            return None
        err = self._client.last_error
        return str(err) if err is not None else None

    def _set_state(self, state: SessionState) -> None:
        self._state = state

    async def _on_error(self, error: Exception) -> None:
        if self._state not in _LIVE_STATES or self._observer is None:
            logger.debug("async error outside live session ignored: {}", error)
            return
        self._set_state(SessionState.FAULTED)
        event = AsyncErrorEvent.from_exception(
            error,
            connection=self._settings.client_name,
            subscription=getattr(error, "subject", None),
        )
        try:
            await self._observer.on_async_error(event)
        except Exception as e:
            logger.exception("error observer failed: {}", e)

    async def _on_disconnected(self) -> None:
        if self._closing:
            return
        _log("broker_disconnect_detected", url=self._settings.broker_url)

    async def _on_closed(self) -> None:
        if self._closing:
            return
        self._set_state(SessionState.CLOSED)
        _log("session_closed", reason="closed_by_client_library")

    async def connect(self, observer: ErrorObserver) -> None:
        if self._state != SessionState.DISCONNECTED or self._client is not None:
            raise RuntimeError("session_already_connected")
        self._observer = observer
        self._set_state(SessionState.CONNECTING)
        _log("session_connecting", url=self._settings.broker_url)
        try:
            self._client = await nats.connect(
                servers=[self._settings.broker_url],
                name=self._settings.client_name,
                connect_timeout=self._settings.connect_timeout_seconds,
                allow_reconnect=False,
                error_cb=self._on_error,
                disconnected_cb=self._on_disconnected,
                closed_cb=self._on_closed,
            )
        except Exception as e:
            _log("session_connect_failed", url=self._settings.broker_url)
            self._set_state(SessionState.DISCONNECTED)
            raise SessionConnectError(str(e) or type(e).__name__) from e
        self._set_state(SessionState.CONNECTED)
        _log("session_connected", url=self._settings.broker_url)

    async def publish(self, message: Message) -> None:
        if self._state not in _LIVE_STATES or self._client is None:
            _log("publish_rejected", reason="session_not_connected", state=self._state.value)
            raise SessionPublishError("session_not_connected")
        try:
            await self._client.publish(message.subject, message.payload)
        except nats_errors.Error as e:
            _log("publish_rejected", reason="client_error")
            raise SessionPublishError(str(e) or type(e).__name__) from e
        _log("publish_sent", subject=message.subject, size=len(message.payload))

    async def flush(self, timeout: float) -> None:
        if self._client is None:
            raise RuntimeError("session_not_connected")
        try:
            await self._client.flush(timeout=timeout)
        except (nats_errors.Error, asyncio.TimeoutError) as e:
            raise SessionFlushError(str(e) or type(e).__name__) from e
        _log("flush_completed")

    async def close(self) -> None:
        if self._state == SessionState.CLOSED:
            return
        self._closing = True
        self._set_state(SessionState.CLOSING)
        if self._client is not None:
            try:
                await self._client.close()
            except Exception as e:
                logger.warning("nats client close failed: {}", e)
        self._set_state(SessionState.CLOSED)
        _log("session_closed")
