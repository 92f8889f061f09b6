"""Broker session factory: selects implementation from config. Only place that imports concrete sessions."""
from __future__ import annotations

from probe.app.config.settings import Settings
from probe.app.ports.broker_session import BrokerSession
from probe.app.infrastructure.messaging.nats.nats_session import NatsSession
from probe.app.infrastructure.messaging.inmemory.in_memory_session import InMemorySession


def create_broker_session(settings: Settings) -> BrokerSession:
    backend = settings.session_backend.strip().lower()

    if backend == "nats":
        return NatsSession(settings)

    if backend == "inmemory":
        return InMemorySession(
            name=settings.client_name,
            enforce_reserved=settings.inmemory_enforce_reserved,
            error_delay_seconds=settings.inmemory_error_delay_seconds,
        )

    raise ValueError(f"Unsupported session backend: {backend}")
