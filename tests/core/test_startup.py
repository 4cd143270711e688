from fastapi.testclient import TestClient

import main
from app.core.config import settings


def test_startup_creates_tables_when_enabled(monkeypatch):
    calls = []
    monkeypatch.setattr(settings, "AUTO_CREATE_TABLES", True)
    monkeypatch.setattr(main, "init_db", lambda: calls.append("init_db"))

    with TestClient(main.app):
        assert calls == ["init_db"]


def test_startup_leaves_schema_alone_by_default(monkeypatch):
    calls = []
    monkeypatch.setattr(settings, "AUTO_CREATE_TABLES", False)
    monkeypatch.setattr(main, "init_db", lambda: calls.append("init_db"))

    with TestClient(main.app):
        pass
    assert calls == []
    assert main.app.router.on_startup == []
