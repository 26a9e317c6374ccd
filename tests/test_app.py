from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from core import db
from core.config import DEFAULT_MAX_FILE_BYTES, Settings
from main import create_app


def test_health(client, auth_headers):
    r = client.get("/health", headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_settings_defaults(monkeypatch):
    for name in ("UPLOAD_DIR", "API_KEY", "PORT", "DATABASE_URL", "MAX_FILE_BYTES", "ALLOWED_TABLES", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()

    assert s.upload_dir == Path("/TESTE")
    assert s.api_key is None
    assert s.port == 3000
    assert s.max_file_bytes == DEFAULT_MAX_FILE_BYTES == 200 * 1024 * 1024
    assert s.max_files == 50
    assert s.allowed_tables == frozenset()


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path))
    monkeypatch.setenv("API_KEY", "k")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("MAX_FILES", "not-a-number")
    monkeypatch.setenv("ALLOWED_TABLES", "events, readings ,")
    monkeypatch.setenv("CORS_ORIGINS", "http://a,http://b")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    s = Settings.from_env()

    assert s.upload_dir == tmp_path
    assert s.api_key == "k"
    assert s.port == 8080
    assert s.max_files == 50
    assert s.allowed_tables == frozenset({"events", "readings"})
    assert s.cors_origins == ("http://a", "http://b")
    assert s.log_level == "DEBUG"


def test_settings_are_immutable():
    with pytest.raises(AttributeError):
        Settings().api_key = "x"


def test_startup_fails_without_database(upload_dir):
    app = create_app(Settings(upload_dir=upload_dir, api_key="k", database_url=""))
    with pytest.raises(RuntimeError):
        with TestClient(app):
            pass


def test_startup_creates_upload_dir_and_pool(upload_dir, monkeypatch):
    calls = []

    async def fake_init(url):
        calls.append(("init", url))

    async def fake_close():
        calls.append(("close",))

    monkeypatch.setattr(db, "init_pool", fake_init)
    monkeypatch.setattr(db, "close_pool", fake_close)

    app = create_app(Settings(upload_dir=upload_dir, api_key="k", database_url="postgresql://x/y"))
    with TestClient(app) as c:
        assert upload_dir.is_dir()
        assert c.get("/health", headers={"x-api-key": "k"}).status_code == 200

    assert calls == [("init", "postgresql://x/y"), ("close",)]


def test_sanitize_database_url_drops_sslmode():
    url = "postgresql://u:p@h:5432/db?sslmode=require&application_name=x"
    assert db._sanitize_database_url(url) == "postgresql://u:p@h:5432/db?application_name=x"
