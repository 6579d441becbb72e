"""Pytest configuration and fixtures."""

import logging
from pathlib import Path

import pytest
import structlog

from cofinance.log import LOGGER_NAME
from cofinance.store import RecordStore


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer .env values out of the tests."""
    for key in ("DATABASE_URL", "DB_ECHO", "COFINANCE_LINK_BALANCES", "DATE_FORMAT", "LOG_JSON"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'cofinance.db'}"


@pytest.fixture
def store(db_url: str):
    """File-backed store in a temp dir."""
    s = RecordStore.open(db_url, link_balances=False)
    yield s
    s.close()


@pytest.fixture
def linked_store(db_url: str):
    """Store where transactions move their account balance."""
    s = RecordStore.open(db_url, link_balances=True)
    yield s
    s.close()


class NotificationRecorder:
    """Counts notifications and remembers what a reader saw at each one."""

    def __init__(self, store, snapshot=None):
        self.count = 0
        self.seen = []
        self._store = store
        self._snapshot = snapshot
        self.token = store.notifier.subscribe(self)

    def __call__(self) -> None:
        self.count += 1
        if self._snapshot is not None:
            self.seen.append(self._snapshot(self._store))


@pytest.fixture
def recorder(store):
    return NotificationRecorder(store)


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Opening a store installs a handler bound to the captured stderr; drop it afterwards."""
    yield
    app_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
    structlog.reset_defaults()
