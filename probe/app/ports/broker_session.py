"""Port: broker session contract. Implementations live in infrastructure."""
from __future__ import annotations

from typing import Protocol

from probe.app.constants import SessionState
from probe.app.domain.models import Message
from probe.app.ports.error_observer import ErrorObserver


class SessionConnectError(Exception):
    """Raised when the initial connection to the broker cannot be established."""


class SessionPublishError(Exception):
    """Raised when a message could not be handed to a live connection."""


class SessionFlushError(Exception):
    """Raised when buffered outbound data could not be flushed."""


class BrokerSession(Protocol):
    async def connect(self, observer: ErrorObserver) -> None: ...
    async def publish(self, message: Message) -> None: ...
    async def flush(self, timeout: float) -> None: ...
    async def close(self) -> None: ...

    @property
    def state(self) -> SessionState: ...

    @property
    def last_error(self) -> str | None: ...
