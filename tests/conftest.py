from __future__ import annotations

from datetime import datetime

import pytest

from config import get_settings_module


@pytest.fixture
def fixed_now():
    return datetime(2025, 6, 15, 9, 0, 0)


@pytest.fixture(autouse=True)
def testing_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    assert get_settings_module().endswith("testing")
