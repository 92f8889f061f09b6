from __future__ import annotations

import pytest

from probe.app.config.settings import Settings
from tests.fakes import make_settings


@pytest.fixture()
def settings() -> Settings:
    return make_settings()
