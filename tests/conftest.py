import os

import pytest
from fastapi.testclient import TestClient

# Force a private in-memory database before the app reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORE_BACKEND"] = "sql"
os.environ["LOG_COLOR"] = "false"

from string_analyzer import database  # noqa: E402
from string_analyzer.main import app  # noqa: E402
from string_analyzer.store import MemoryStringStore, SqlStringStore  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db():
    """Start every test from an empty schema."""
    database.init_db()
    yield
    database.Base.metadata.drop_all(bind=database.engine)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture(params=["sql", "memory"])
def store(request):
    if request.param == "memory":
        yield MemoryStringStore()
        return
    db = database.SessionLocal()
    try:
        yield SqlStringStore(db)
    finally:
        db.close()
