"""
Shared fixtures: an in-memory stand-in for the asyncpg pool and a TestClient
wired to it through the application lifespan.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from core import db


class FakePool:
    """Answer the three advert statements from a Python list."""

    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self.next_id = 1
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.error: BaseException | None = None
        self.closed = False

    def _record(self, sql: str, args: tuple[Any, ...]) -> str:
        self.calls.append((sql, args))
        if self.error is not None:
            raise self.error
        return " ".join(sql.split()).upper()

    async def fetch(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        statement = self._record(sql, args)
        assert statement.startswith("SELECT")
        return [dict(row) for row in sorted(self.rows, key=lambda r: r["id"], reverse=True)]

    async def fetchrow(self, sql: str, *args: Any) -> dict[str, Any] | None:
        statement = self._record(sql, args)
        assert statement.startswith("INSERT INTO ADVERT")
        title, description, price, image_path = args
        row = {
            "id": self.next_id,
            "title": title,
            "description": description,
            "price": price,
            "image_path": image_path,
        }
        self.next_id += 1
        self.rows.append(row)
        return {"id": row["id"]}

    async def execute(self, sql: str, *args: Any) -> None:
        statement = self._record(sql, args)
        assert statement.startswith("DELETE FROM ADVERT")
        (advert_id,) = args
        self.rows = [row for row in self.rows if row["id"] != advert_id]

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()


@pytest.fixture
def static_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    root = tmp_path / "static"
    monkeypatch.setenv("STATIC_DIR", str(root))
    monkeypatch.delenv("UPLOAD_DIR", raising=False)
    monkeypatch.delenv("MAX_UPLOAD_BYTES", raising=False)
    monkeypatch.setenv("IMAGE_PATH", "http://cdn.test/static/images")
    return root


@pytest.fixture
def client(fake_pool: FakePool, static_root: Path, monkeypatch: pytest.MonkeyPatch):
    from main import create_app

    async def fake_init_pool() -> None:
        db._pool = fake_pool

    monkeypatch.setattr(db, "_pool", None)
    monkeypatch.setattr(db, "init_pool", fake_init_pool)

    with TestClient(create_app()) as test_client:
        yield test_client
