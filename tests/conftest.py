# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from core import db
from core.config import Settings
from main import create_app

API_KEY = "test-secret"


# --------------------------------------------------------------------
# Settings + app per test, with uploads going to a temp directory
# --------------------------------------------------------------------
@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir: Path) -> Settings:
    return Settings(upload_dir=upload_dir, api_key=API_KEY, database_url="postgresql://test/test")


@pytest.fixture
def client(settings: Settings) -> TestClient:
    # Not used as a context manager: lifespan (and the real DB pool) stays off.
    return TestClient(create_app(settings))


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"x-api-key": API_KEY}


# --------------------------------------------------------------------
# Stand-in for the asyncpg pool
# --------------------------------------------------------------------
class FakePool:
    def __init__(self, row: dict[str, Any] | None = None, error: Exception | None = None):
        self.row = row if row is not None else {"id": 1}
        self.error = error
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    async def fetchrow(self, sql: str, *args: Any):
        self.calls.append((sql, args))
        if self.error is not None:
            raise self.error
        return self.row

    async def close(self) -> None:
        return None


@pytest.fixture
def fake_pool(monkeypatch) -> FakePool:
    pool = FakePool(row={"id": 42})
    monkeypatch.setattr(db, "_pool", pool)
    return pool
