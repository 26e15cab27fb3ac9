import os
from datetime import date

# Set env vars BEFORE any habithub imports so config picks them up
os.environ["HABITHUB_STORE"] = "memory"
os.environ["HABITHUB_SCHEDULER"] = "off"
os.environ["HABITHUB_TIMEZONE"] = "Asia/Kolkata"

import pytest
from fastapi.testclient import TestClient

from habithub import dates, db

# Wednesday of week 2026-W43 (Sun Oct 18 - Sat Oct 24)
TODAY = date(2026, 10, 21)


@pytest.fixture
def store():
    return db.MemoryStore()


@pytest.fixture
def freeze_today(monkeypatch):
    """Pin dates.current_date(); returns a setter to move the clock."""

    def _freeze(day: date):
        monkeypatch.setattr(dates, "current_date", lambda: day)
        return day

    _freeze(TODAY)
    return _freeze


@pytest.fixture
def client(store, freeze_today):
    from api.main import app

    app.dependency_overrides[db.get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
