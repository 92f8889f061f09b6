"""Probe composition root: build and lifecycle-manage concrete dependencies.

Composition may: import concrete classes, call factories, store interface types,
manage high-level lifecycle. The session is closed on every exit path once the
dependencies are entered, including a failed connect.
"""
from __future__ import annotations

from types import TracebackType
from typing import Any

from loguru import logger

from probe.app.application.session_bootstrapper import SessionBootstrapper
from probe.app.config.settings import Settings
from probe.app.domain.error_observer import AsyncErrorChannel
from probe.app.domain.models import Message
from probe.app.infrastructure.messaging.factory import create_broker_session
from probe.app.ports.broker_session import BrokerSession


class ProbeDependencies:
    """Holds wired probe dependencies and their lifecycle."""

    def __init__(
        self,
        *,
        settings: Settings,
        session: BrokerSession,
        observer: AsyncErrorChannel | None = None,
    ) -> None:
        self._settings = settings
        self._session = session
        self._observer = observer or AsyncErrorChannel()
        self._bootstrapper = SessionBootstrapper(
            session,
            self._observer,
            message=Message.from_text(settings.subject, settings.payload),
            flush_timeout_seconds=settings.flush_timeout_seconds,
            error_wait_seconds=settings.error_wait_seconds,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def session(self) -> BrokerSession:
        return self._session

    @property
    def observer(self) -> AsyncErrorChannel:
        return self._observer

    @property
    def bootstrapper(self) -> SessionBootstrapper:
        return self._bootstrapper

    async def close(self) -> None:
        try:
            await self._session.close()
        except Exception as exc:
            logger.warning("broker session close failed: {}", exc)

    async def __aenter__(self) -> "ProbeDependencies":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> Any:
        await self.close()
        return None


def create_probe_dependencies(
    settings: Settings | None = None,
    *,
    session: BrokerSession | None = None,
) -> ProbeDependencies:
    _settings = settings or Settings()
    return ProbeDependencies(
        settings=_settings,
        session=session or create_broker_session(_settings),
    )
