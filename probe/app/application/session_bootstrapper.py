from __future__ import annotations

from typing import Any

from loguru import logger

from probe.app.constants import is_reserved_subject
from probe.app.core import SERVICE_NAME
from probe.app.domain.error_observer import AsyncErrorChannel
from probe.app.domain.models import Message, SessionReport
from probe.app.ports.broker_session import BrokerSession, SessionFlushError, SessionPublishError


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class SessionBootstrapper:
    """
    Runs one probe against a broker session: connect, publish, flush, wait, report.

    connect() failures propagate as SessionConnectError and nothing is published.
    Publish and flush failures are logged and reported as published=False or
    flushed=False; a failed publish skips the flush. After flush the
    bootstrapper waits for the observer's first error, bounded by error_wait_seconds;
    an error arriving later than that is not part of the report.
    """

    def __init__(
        self,
        session: BrokerSession,
        observer: AsyncErrorChannel,
        *,
        message: Message,
        flush_timeout_seconds: float,
        error_wait_seconds: float,
    ) -> None:
        self._session = session
        self._observer = observer
        self._message = message
        self._flush_timeout_seconds = flush_timeout_seconds
        self._error_wait_seconds = error_wait_seconds

    async def run(self) -> SessionReport:
        await self._session.connect(self._observer)

        subject = self._message.subject
        if is_reserved_subject(subject):
            _log("reserved_subject_publish", subject=subject)
        published = True
        try:
            await self._session.publish(self._message)
        except SessionPublishError as e:
            logger.warning("publish failed: {}", e)
            published = False

        flushed = False
        if published:
            try:
                await self._session.flush(self._flush_timeout_seconds)
                flushed = True
            except SessionFlushError as e:
                logger.warning("flush failed: {}", e)

        if not await self._observer.wait_for_error(self._error_wait_seconds):
            _log("async_error_wait_elapsed", timeout_seconds=self._error_wait_seconds)

        return SessionReport(
            subject=subject,
            flushed=flushed,
            published=published,
            last_error=self._session.last_error,
            errors=tuple(self._observer.drain()),
        )
