"""
Общие фикстуры тестов

Часы процесса закреплены на 2020-06-15T12:00:00Z (понедельник), зона по
умолчанию — UTC, локаль — en-US. Кэши и настройки сбрасываются вокруг
каждого теста.
"""

import pytest

from civilclock.settings import Settings

# 2020-06-15T12:00:00.000Z
NOW_MS = 1_592_222_400_000


@pytest.fixture(autouse=True)
def fixed_settings():
    Settings.restore_defaults()
    Settings.reset_caches()
    Settings.now = lambda: NOW_MS
    Settings.default_zone = "utc"
    Settings.default_locale = "en-US"
    yield
    Settings.restore_defaults()
    Settings.reset_caches()
