from __future__ import annotations

import os
from typing import Final, Iterator

import pytest

from exception_report.core.config import Settings, get_settings

_TEST_ENV_VARS: Final[dict[str, str]] = {
    "REPORT_APPLICATION_NAME": "foo",
    "LOG_LEVEL": "DEBUG",
}

for key, value in _TEST_ENV_VARS.items():
    os.environ.setdefault(key, value)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def report_settings() -> Settings:
    return Settings(application_name="foo", help_link="http://help")
