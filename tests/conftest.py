import pytest
from fastapi.testclient import TestClient

from school_fees.config import Settings, get_settings
from school_fees.database import Database
from school_fees.main import create_app


@pytest.fixture
def settings(monkeypatch, tmp_path):
    """Test settings: in-memory SQLite, no static directory, stdout logging only."""
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.delenv("DB_DIALECT", raising=False)
    monkeypatch.setenv("DB_STORAGE", ":memory:")
    monkeypatch.setenv("STATIC_DIR", str(tmp_path / "public"))
    monkeypatch.setenv("LOG_FILE_ENABLED", "false")
    get_settings.cache_clear()
    yield Settings()
    get_settings.cache_clear()


@pytest.fixture
def database(settings):
    """A fresh database for every test."""
    db = Database(settings)
    db.reset()
    yield db
    db.dispose()


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_student(client):
    def _make(name="Alice", fees=1000):
        r = client.post("/student", json={"name": name, "fees": fees})
        assert r.status_code == 201
        return r.json()
    return _make
