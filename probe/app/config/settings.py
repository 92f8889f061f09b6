"""Settings for the probe."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from probe.app.constants import DEFAULT_BROKER_URL, DEFAULT_PAYLOAD, DEFAULT_SUBJECT


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    broker_url: str = Field(DEFAULT_BROKER_URL, validation_alias="NATS_URL")
    client_name: str = Field("nats-err-probe", validation_alias="NATS_CLIENT_NAME")
    connect_timeout_seconds: float = Field(2.0, validation_alias="CONNECT_TIMEOUT_SECONDS")

    subject: str = Field(DEFAULT_SUBJECT, validation_alias="PROBE_SUBJECT")
    payload: str = Field(DEFAULT_PAYLOAD, validation_alias="PROBE_PAYLOAD")

    flush_timeout_seconds: float = Field(10.0, validation_alias="FLUSH_TIMEOUT_SECONDS")
    # Upper bound on how long we wait for the broker to report an async error after flush.
    error_wait_seconds: float = Field(1.0, validation_alias="ERROR_WAIT_SECONDS")

    session_backend: str = Field("nats", validation_alias="SESSION_BACKEND")
    inmemory_enforce_reserved: bool = Field(True, validation_alias="INMEMORY_ENFORCE_RESERVED")
    inmemory_error_delay_seconds: float = Field(0.0, validation_alias="INMEMORY_ERROR_DELAY_SECONDS")
