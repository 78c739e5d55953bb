"""
Shared test fixtures

Tests run against an in-memory SQLite database; the app's get_db dependency
is overridden so every request in a test shares the test session.
"""
import os

# Must be set before sims is imported: settings are read once per process
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUDIT_LOG_FILE"] = ""
os.environ["LOG_FILE"] = ""
os.environ["LOG_FORMAT"] = "text"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from sims.db.base import Base
from sims.db.session import build_engine, get_db
from sims.main import app
import sims.models  # noqa: F401  (registers tables)
from sims.services.settings_service import ensure_default_settings

engine = build_engine("sqlite://")
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """Fresh schema with default settings for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    ensure_default_settings(db)
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """Test client with database override"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def printer(client):
    response = client.post("/api/v1/printers", json={"name": "Bambu X1C"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def filament(client):
    response = client.post(
        "/api/v1/filaments",
        json={
            "name": "Basic Black",
            "material": "PLA",
            "color": "Black",
            "quantity": 3,
            "manufacturer": "Bambu",
        },
    )
    assert response.status_code == 201
    return response.json()
