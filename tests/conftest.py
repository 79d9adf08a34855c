"""Pytest configuration and fixtures for ICD-10 Core tests."""

import os

# Point the application engine at SQLite before any icd10_core import builds it.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from icd10_core.db.models import Base
from icd10_core.db.session import get_db
from icd10_core.main import create_app
from icd10_core.repositories.code_store import CodeStoreRepository
from icd10_core.repositories.dictionary_repository import DictionaryRepository
from icd10_core.scripts.load_icd10 import load_icd10_into_session
from icd10_core.services.icd10_state import get_synonym_dictionary
from icd10_core.services.query_expansion import QueryExpansionEngine
from icd10_core.services.synonym_dictionary import SynonymDictionary

SAMPLE_CSV = Path(__file__).resolve().parents[1] / "icd10_core" / "data" / "icd10_sample.csv"


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across connections."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    """Empty database session."""
    with session_factory() as session:
        yield session


@pytest.fixture
def loaded_session(db_session: Session) -> Session:
    """Session over a catalog loaded from the bundled sample CSV."""
    load_icd10_into_session(db_session, SAMPLE_CSV)
    return db_session


@pytest.fixture
def store(loaded_session: Session) -> CodeStoreRepository:
    return CodeStoreRepository(loaded_session)


@pytest.fixture
def dictionary() -> SynonymDictionary:
    """Base dictionary kept in memory only."""
    d = SynonymDictionary()
    d.initialize()
    return d


@pytest.fixture
def persisted_dictionary(db_session: Session) -> SynonymDictionary:
    """Dictionary seeded into and loaded from the database."""
    d = SynonymDictionary()
    d.initialize(DictionaryRepository(db_session))
    return d


@pytest.fixture
def expansion_engine(dictionary: SynonymDictionary) -> QueryExpansionEngine:
    return QueryExpansionEngine(dictionary)


@pytest.fixture
def client(
    session_factory,
    loaded_session: Session,
    dictionary: SynonymDictionary,
) -> Generator[TestClient, None, None]:
    """Test client over the loaded catalog.

    The lifespan handler is not entered; the dictionary is injected through a
    dependency override instead.
    """
    app = create_app()

    def override_get_db():
        with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_synonym_dictionary] = lambda: dictionary

    yield TestClient(app)

    app.dependency_overrides.clear()
