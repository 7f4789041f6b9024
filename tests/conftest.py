# tests/conftest.py
import os

# The application engine must never touch the developer's database file
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SEMANTIC_BACKEND"] = "none"
os.environ["DICTIONARY_VALIDATION_ENABLED"] = "false"

import pytest
import logging
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.api import deps
from app.api import games as games_api
from app.crud import crud_category
from app.schemas.validated_word import ValidatedWord
from app.services.categorization_engine import CategorizationEngine
from app.services.stores import SqlCategoryRepository, SqlValidationCache
from app.services.validation_service import ValidationService
from app.services.validators.cache_validator import CacheValidator
from app.services.validators.fixed_list_validator import FixedListValidator

SQLALCHEMY_DATABASE_URL_TEST = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL_TEST,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create tables once for the entire test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

def override_get_db():
    """Dependency override for test database sessions."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

def build_offline_validation_service() -> ValidationService:
    """Cache and word lists only, so API tests never reach the network."""
    cache = SqlValidationCache(TestingSessionLocal)
    engine_ = CategorizationEngine([CacheValidator(cache), FixedListValidator()])
    return ValidationService(engine_, SqlCategoryRepository(TestingSessionLocal), cache)

app.dependency_overrides[deps.get_db] = override_get_db
app.dependency_overrides[deps.get_validation_service] = build_offline_validation_service

@pytest.fixture(scope="function")
def db_session():
    """
    Provides a clean, isolated database session for each test function
    by using transactions and rollbacks.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)
    yield session
    session.close()
    transaction.rollback()
    connection.close()

@pytest.fixture(scope="module")
def seeded_categories():
    """Predefined categories committed to the test database (idempotent)."""
    db = TestingSessionLocal()
    try:
        crud_category.seed_predefined_categories(db)
    finally:
        db.close()

@pytest.fixture(scope="module")
def client(seeded_categories) -> TestClient:
    """
    Provides a TestClient for making API requests. Used as a context manager so
    countdown tasks live on one event loop for the whole module.
    """
    with TestClient(app) as test_client:
        yield test_client
    # API calls commit cache rows for real; don't leak them into later modules
    db = TestingSessionLocal()
    try:
        db.query(ValidatedWord).delete()
        db.commit()
    finally:
        db.close()

@pytest.fixture(autouse=True)
def reset_in_memory_state():
    """Clears in-memory state before each test."""
    games_api.active_games.clear()
    yield
    # Pending countdowns are cancelled when the client's event loop shuts down
    games_api.active_games.clear()

def pytest_configure(config):
    """
    Hook to configure logging levels before tests are run.
    This silences noisy third-party libraries.
    """
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
