"""Runs the probe against a live broker. Skipped unless NATS_URL is set.

Whether the broker rejects publishes to `_SYS.` depends on its permission
configuration, so the test accepts both outcomes and only checks consistency.
"""
import asyncio
import os

import pytest

from probe.app.main import run_probe
from tests.fakes import make_settings

NATS_URL = os.environ.get("NATS_URL")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not NATS_URL, reason="NATS_URL not set"),
]


def test_probe_against_live_broker():
    settings = make_settings(session_backend="nats", broker_url=NATS_URL, error_wait_seconds=2.0)
    report = asyncio.run(run_probe(settings))

    assert report.flushed is True
    if report.errors:
        assert len(report.errors) == 1
        assert report.errors[0].message
        assert report.last_error == report.errors[0].message
    else:
        assert report.last_error is None
        assert report.last_error_line() == "nc.LastError:  "
