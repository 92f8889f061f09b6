"""Unit tests for AsyncErrorChannel: logging, completion signal, drain."""
from __future__ import annotations

import asyncio

import pytest
from loguru import logger

from probe.app.domain.error_observer import AsyncErrorChannel
from probe.app.domain.models import AsyncErrorEvent


def _event(message: str = "nats: permissions violation") -> AsyncErrorEvent:
    return AsyncErrorEvent(connection="probe-test", message=message, error_type="Error")


@pytest.mark.asyncio
async def test_wait_for_error_times_out_when_nothing_observed():
    channel = AsyncErrorChannel()
    assert await channel.wait_for_error(0.05) is False
    assert channel.drain() == []


@pytest.mark.asyncio
async def test_wait_for_error_returns_as_soon_as_error_arrives():
    channel = AsyncErrorChannel()

    async def deliver() -> None:
        await asyncio.sleep(0.01)
        await channel.on_async_error(_event())

    loop = asyncio.get_running_loop()
    task = asyncio.create_task(deliver())
    start = loop.time()
    assert await channel.wait_for_error(5.0) is True
    assert loop.time() - start < 1.0
    await task
    assert [e.message for e in channel.drain()] == ["nats: permissions violation"]
    assert channel.observed == 1


@pytest.mark.asyncio
async def test_async_error_is_logged_with_message():
    lines: list[str] = []
    sink_id = logger.add(lambda m: lines.append(str(m)), format="{message}")
    try:
        await AsyncErrorChannel().on_async_error(_event("nats: boom"))
    finally:
        logger.remove(sink_id)
    assert any("Async Error: nats: boom" in line for line in lines)


@pytest.mark.asyncio
async def test_drain_returns_events_in_order_and_empties_queue():
    channel = AsyncErrorChannel()
    await channel.on_async_error(_event("first"))
    await channel.on_async_error(_event("second"))
    assert [e.message for e in channel.drain()] == ["first", "second"]
    assert channel.drain() == []
    assert await channel.wait_for_error(0.0) is True


class _BrokenQueue:
    def put_nowait(self, item: AsyncErrorEvent) -> None:
        raise RuntimeError("queue broken")


@pytest.mark.asyncio
async def test_internal_failure_is_logged_and_not_raised():
    channel = AsyncErrorChannel()
    channel._events = _BrokenQueue()  # type: ignore[assignment]
    lines: list[str] = []
    sink_id = logger.add(lambda m: lines.append(str(m)), format="{message}")
    try:
        await channel.on_async_error(_event())
    finally:
        logger.remove(sink_id)

    assert channel.observed == 0
    assert any("error observer failed: queue broken" in line for line in lines)
