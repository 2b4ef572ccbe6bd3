"""
Pytest configuration and shared fixtures for the test suite.
Ensures proper Python path and provides common fixtures for unit and integration tests.
"""
import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root and src to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
src_path = project_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

# Keep test runs away from the developer database.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("USE_TEMPLATE_GENERATION", "true")


SAMPLE_DOCUMENT = """# Learning Path: Python

## Overview
Python is a general purpose language used everywhere.

## Prerequisites
- Basic computer literacy (required)
- Using a text editor
- Command line basics (optional)

## Learning Journey

### Stage 1: Fundamentals
- Variables
- Loops
- Functions

### Stage 2: Core Concepts
- Closures
- Generators

### Stage 3: Practical Applications
- Scripting
- Testing
- Packaging
- Web APIs
- Data analysis

## Resources
- Python crash course video
- Fluent Python book
- Jupyter tool
- Real Python articles
"""


# ----- In-memory DB (for tests that need DB without touching real DB) -----
@pytest.fixture
def in_memory_engine():
    """Create an in-memory SQLite engine shared by every connection."""
    return create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def db_session(in_memory_engine):
    """Create an in-memory database session. Uses api.config.Base for schema."""
    from api.config import Base
    import api.models.models  # noqa: F401
    Base.metadata.create_all(in_memory_engine)
    SessionLocal = sessionmaker(bind=in_memory_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def test_user(db_session):
    """Create a test user in the DB."""
    from api.models.models import User
    user = User(email="learner@example.com", hashed_password="x", preferences=None)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


# ----- Engine fixtures -----
@pytest.fixture
def sample_document():
    return SAMPLE_DOCUMENT


@pytest.fixture
def template_generator():
    from learning_engine.generation import TemplateCurriculumGenerator
    return TemplateCurriculumGenerator()


@pytest.fixture
def memory_repository():
    from learning_engine.store import InMemoryPathRepository
    return InMemoryPathRepository()


@pytest.fixture
def sample_path(sample_document):
    """A 10-step Python path built from SAMPLE_DOCUMENT, owned by user 1."""
    from learning_engine.path_builder import build_learning_path
    return build_learning_path("Python", "beginner", 1, sample_document)
