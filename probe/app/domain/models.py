"""Domain models."""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Message:
    """Single outbound message (value object). Lives only for the publish call."""

    subject: str
    payload: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.subject, str) or not self.subject:
            raise TypeError("message.subject must be a non-empty str")
        if any(ch.isspace() for ch in self.subject):
            raise ValueError("message.subject must not contain whitespace")
        if not isinstance(self.payload, bytes):
            raise TypeError("message.payload must be bytes")

    @staticmethod
    def from_text(subject: str, payload: str) -> "Message":
        return Message(subject=subject, payload=payload.encode())


@dataclass(frozen=True)
class AsyncErrorEvent:
    """Out-of-band error reported by the connection layer."""

    connection: str
    message: str
    error_type: str
    subscription: str | None = None

    @staticmethod
    def from_exception(
        error: BaseException,
        *,
        connection: str,
        subscription: str | None = None,
    ) -> "AsyncErrorEvent":
        return AsyncErrorEvent(
            connection=connection,
            message=str(error),
            error_type=type(error).__name__,
            subscription=subscription,
        )


@dataclass(frozen=True)
class SessionReport:
    """Outcome of one bootstrapper run."""

    subject: str
    flushed: bool
    last_error: str | None
    published: bool = True
    errors: tuple[AsyncErrorEvent, ...] = field(default_factory=tuple)

    @property
    def faulted(self) -> bool:
        return bool(self.errors)

    def last_error_line(self) -> str:
        # Two spaces after the colon: label and value are printed as separate fields.
        return f"nc.LastError:  {self.last_error or ''}"
