import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app import config
from app import db as db_module


@pytest.fixture
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setattr(db_module, "DATABASE_PATH", str(tmp_path / "test.db"))
    monkeypatch.setattr(config, "LOG_STORE", "sqlite")
    monkeypatch.setattr(config, "DISPLAY_TIMEZONE", "Asia/Seoul")
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def insert_log(client):
    """Insert a row with a fixed created_at, bypassing the API."""

    def _insert(created_at: str, parts: list[dict], year: int = 2024, month: int = 1) -> int:
        conn = db_module.get_db()
        try:
            cur = conn.execute(
                "INSERT INTO workouts (created_at, year, month, parts) VALUES (?, ?, ?, ?)",
                (created_at, year, month, json.dumps(parts, ensure_ascii=False)),
            )
            conn.commit()
            return cur.lastrowid
        finally:
            conn.close()

    return _insert
