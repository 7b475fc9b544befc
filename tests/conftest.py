"""
Shared pytest fixtures.

Uses a SQLite file database so no Postgres is required for tests. Every
test starts from empty tables. "Now" is pinned through the clock
dependencies so daily limits and streaks are deterministic.
"""
from datetime import date, datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from stretch_tracker import models  # noqa: F401
from stretch_tracker.core.clock import local_now, local_today
from stretch_tracker.db.base import Base
from stretch_tracker.main import app
from stretch_tracker.stores import get_stores, memory, sql
from stretch_tracker.stores.json_file import JsonFileDatabase
from stretch_tracker.stores.memory import MemoryDatabase

SQLITE_URL = "sqlite:///./test_stretch_tracker.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

FIXED_NOW = datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)
TODAY = FIXED_NOW.date()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
        db.close()


@pytest.fixture()
def sql_stores(db):
    return sql.build_stores(db)


@pytest.fixture()
def memory_stores():
    return memory.build_stores(MemoryDatabase())


@pytest.fixture()
def json_stores(tmp_path):
    return memory.build_stores(JsonFileDatabase(tmp_path / "stretch_tracker.json"))


@pytest.fixture(params=["sql", "memory", "json"])
def stores(request):
    """Runs the test once per backend."""
    return request.getfixturevalue(f"{request.param}_stores")


@pytest.fixture()
def today() -> date:
    return TODAY


@pytest.fixture()
def client(sql_stores):
    app.dependency_overrides[get_stores] = lambda: sql_stores
    app.dependency_overrides[local_now] = lambda: FIXED_NOW
    app.dependency_overrides[local_today] = lambda: TODAY
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
