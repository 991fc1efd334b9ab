from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'pipelines.runner'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


DITAT_ENV = {
    "GETTING_ALL_DRIVERS_URL": "https://ditat.test/api/tms/drivers",
    "GETTING_DISPATCHERS_URL": "https://ditat.test/api/tms/dispatchers",
    "GETTING_TOKEN_URL": "https://ditat.test/api/auth/login",
    "DB_HOST": "localhost",
    "DB_USER": "sync",
    "DB_NAME": "drivers.db",
    "DB_PASSWORD": "secret",
    "DITAT_APPLICATION_ROLE": "Login to TMS",
    "DITAT_ACCOUNT_ID": "acme",
    "DITAT_AUTHORIZATION": "Basic dGVzdDp0ZXN0",
}


@pytest.fixture
def ditat_env(monkeypatch):
    from config.settings import get_settings

    for key, value in DITAT_ENV.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("DISPATCHERS", raising=False)
    get_settings.cache_clear()
    yield DITAT_ENV
    get_settings.cache_clear()


@pytest.fixture
def settings(ditat_env, tmp_path):
    import dataclasses

    from config.settings import get_settings

    return dataclasses.replace(
        get_settings(),
        db_name=str(tmp_path / "drivers.db"),
        dispatchers={12: "Marko", 28: "Mario", 53: "Paul"},
    )


@pytest.fixture
def pool(settings):
    from db.pool import ConnectionPool

    p = ConnectionPool(settings.db_name, max_size=2)
    yield p
    p.close()
