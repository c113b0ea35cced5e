"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides test database, client, reference set and scan session fixtures.

==============================================================================
"""

import json
import os

# Settings are cached on first import; point them at throwaway resources
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REFERENCE_SOURCE"] = "tests/__missing__/bigdb.json"
os.environ["REFERENCE_RETRY_SECONDS"] = "3600"
os.environ["REQUIRED_FRAMES"] = "3"
os.environ["PROMPT_ON_NEW_SCAN"] = "true"
os.environ["EDIT_ON_DUPLICATE_SCAN"] = "true"

import pytest
from pathlib import Path
from typing import Callable, Generator, Iterable, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from scanstock.main import app
from scanstock.catalog import ReferenceCatalog, get_reference_catalog, init_reference_catalog
from scanstock.db.database import Base, get_db
from scanstock.services.inventory_service import InventoryService
from scanstock.services.scan_session import reset_scan_session


MISSING_REFERENCE = os.environ["REFERENCE_SOURCE"]

REFERENCE_CODES = ["4006381333931", "5449000000996", "96385074"]


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

# In-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def inventory(db: Session) -> InventoryService:
    """Inventory service bound to the test database."""
    return InventoryService(db, expiry_days=30)


# ============================================================================
# GLOBAL STATE FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def fresh_globals() -> Generator[ReferenceCatalog, None, None]:
    """Fresh (unloaded) reference catalog and scan session for every test."""
    catalog = init_reference_catalog(MISSING_REFERENCE)
    reset_scan_session()
    yield catalog
    reset_scan_session()


def write_reference(path: Path, codes: Iterable[str]) -> Path:
    """Write a reference document and return its path."""
    path.write_text(json.dumps({"barcodes": list(codes)}), encoding="utf-8")
    return path


@pytest.fixture
def reference_codes() -> List[str]:
    return list(REFERENCE_CODES)


@pytest.fixture
def missing_reference() -> str:
    return MISSING_REFERENCE


@pytest.fixture
def make_reference(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a reference document under tmp_path."""
    def _make(codes: Iterable[str], name: str = "reference.json") -> Path:
        return write_reference(tmp_path / name, codes)
    return _make


@pytest.fixture
def reference_file(tmp_path: Path) -> Path:
    return write_reference(tmp_path / "bigdb.json", REFERENCE_CODES)


@pytest.fixture
def loaded_reference(reference_file: Path) -> ReferenceCatalog:
    """Global reference catalog loaded with REFERENCE_CODES."""
    catalog = get_reference_catalog()
    assert catalog.load(str(reference_file))
    return catalog


# ============================================================================
# CLIENT FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
