"""Probe-level constants shared across modules."""
from __future__ import annotations

from enum import Enum

DEFAULT_BROKER_URL = "nats://127.0.0.1:4222"
DEFAULT_SUBJECT = "_SYS.hi"
DEFAULT_PAYLOAD = "hi"

# Subjects under this prefix are reserved by the broker for system traffic.
RESERVED_SUBJECT_PREFIX = "_SYS."


class SessionState(str, Enum):
    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"
    FAULTED = "FAULTED"
    CLOSING = "CLOSING"
    CLOSED = "CLOSED"


def is_reserved_subject(subject: str) -> bool:
    return subject.startswith(RESERVED_SUBJECT_PREFIX)
