"""
Integration test fixtures. Overrides get_db and the generator for API tests.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


@pytest.fixture
def override_get_db():
    """Create in-memory engine and session factory for API tests."""
    from api.config import Base
    import api.models.models  # noqa: F401
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def _get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    return _get_db


@pytest.fixture
def api_client(override_get_db, sample_document):
    """FastAPI TestClient with in-memory DB and a deterministic generator."""
    from fastapi.testclient import TestClient
    from unittest.mock import MagicMock
    from api.api import app
    from api.config import get_db
    from api.routes.learning_path_routes import get_generator
    from learning_engine.generation import TemplateCurriculumGenerator

    generator = MagicMock(wraps=TemplateCurriculumGenerator())
    generator.generate.return_value = sample_document
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generator] = lambda: generator
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def _register(client, email, password="testpass123"):
    response = client.post(
        "/auth/register",
        json={"email": email, "password": password, "confirm_password": password},
    )
    assert response.status_code == 200, response.text
    return response


@pytest.fixture
def register():
    """Register a user through the API; the client keeps the auth cookie."""
    return _register


@pytest.fixture
def authed_client(api_client):
    """API client carrying the auth cookie of a freshly registered user."""
    _register(api_client, "learner@example.com")
    return api_client
