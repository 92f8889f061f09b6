"""Async error channel: the observer handed to the broker session.

The session invokes `on_async_error` from the client library's reading task, outside
the bootstrapper's main sequence. Each event is logged, pushed onto an asyncio.Queue
and signals a completion Event, so the main sequence can wait for the first error
with a bounded timeout instead of sleeping a fixed interval.

If the broker reports the error after the wait window has elapsed, the report is
produced without it. Callers choose the window; nothing here extends it.
"""
from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger

from probe.app.core import SERVICE_NAME
from probe.app.domain.models import AsyncErrorEvent


class AsyncErrorChannel:
    """ErrorObserver implementation"""

    def __init__(self) -> None:
        self._events: asyncio.Queue[AsyncErrorEvent] = asyncio.Queue()
        self._first_error = asyncio.Event()
        self._observed = 0

    @property
    def observed(self) -> int:
        return self._observed

    async def on_async_error(self, event: AsyncErrorEvent) -> None:
        try:
            bound: dict[str, Any] = {"connection": event.connection, "error_type": event.error_type}
            if event.subscription is not None:
                bound["subscription"] = event.subscription
            logger.bind(service_name=SERVICE_NAME, event="async_error", **bound).warning(
                "Async Error: {}", event.message
            )
            self._events.put_nowait(event)
            self._observed += 1
            self._first_error.set()
        except Exception as e:
            logger.exception("error observer failed: {}", e)

    async def wait_for_error(self, timeout: float) -> bool:
        """Wait until at least one error was observed or `timeout` elapses. Returns True if one was."""
        if self._first_error.is_set():
            return True
        try:
            await asyncio.wait_for(self._first_error.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return False
        return True

    def drain(self) -> list[AsyncErrorEvent]:
        events: list[AsyncErrorEvent] = []
        while True:
            try:
                events.append(self._events.get_nowait())
            except asyncio.QueueEmpty:
                break
        return events
