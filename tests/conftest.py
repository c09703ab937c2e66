"""Shared fixtures: a throwaway SQLite database per test and an HTTP client."""

import os

# Settings are read at import time; point them at a harmless default first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./outswap-test.db")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import httpx
import pytest

from outswap.core.database import Database
from outswap.main import create_app


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'outswap.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session_maker() as session:
        yield session


@pytest.fixture
async def client(database):
    app = create_app(database=database)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
