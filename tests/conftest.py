import os

import pytest

# Must be set before the app modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_BACKEND"] = "database"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["CACHE_ENABLED"] = "false"
os.environ["SEED_DEFAULTS"] = "false"
os.environ["RATE_LIMIT_PER_MINUTE"] = "100000"
os.environ["RATE_LIMIT_PER_HOUR"] = "100000"

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.database import Base, build_engine
import app.models  # noqa: F401
from app.main import app as fastapi_app
from app.storage import DatabaseStorage, MemoryStorage, get_storage
from app.utils.rate_limiter import rate_limiter


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(params=["database", "memory"])
def storage(request, db_session):
    if request.param == "database":
        return DatabaseStorage(db_session)
    return MemoryStorage()


@pytest.fixture
def client(session_factory):
    def override_storage():
        session = session_factory()
        try:
            yield DatabaseStorage(session)
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_storage] = override_storage
    rate_limiter.reset()
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def make_question():
    """Factory adding a valid question to a storage"""
    def _make(storage, **overrides):
        fields = {
            "question": "What is 2 + 2?",
            "options": ["3", "4", "5"],
            "answer": 1,
            "explanation": "Basic arithmetic",
            "category": None,
            "subject": None,
            "difficulty": "easy",
        }
        fields.update(overrides)
        return storage.create_question(**fields)
    return _make
