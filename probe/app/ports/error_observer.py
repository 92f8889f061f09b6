"""Port: asynchronous error observer. Sessions call it off the main sequence."""
from __future__ import annotations

from typing import Protocol

from probe.app.domain.models import AsyncErrorEvent


class ErrorObserver(Protocol):
    async def on_async_error(self, event: AsyncErrorEvent) -> None:
        """Record one out-of-band error. Must not raise and must return promptly."""
        ...
