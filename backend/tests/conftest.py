"""
Pytest configuration and fixtures
"""
import os
import random
import sys
import tempfile
from pathlib import Path

import pytest
from sqlalchemy.orm import Session

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Settings are cached on first use, so the test environment has to be in
# place before any virtual_doctor module is imported.
_test_db_dir = tempfile.mkdtemp(prefix="virtual_doctor_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_test_db_dir) / 'test.sqlite3'}"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ["LOG_FORMAT"] = "text"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from virtual_doctor.core.conversation_store import (ConversationStore,
                                                    get_conversation_store)
from virtual_doctor.core.database import Base, get_db, get_engine, get_session_local
from virtual_doctor.core.response_engine import ResponseEngine


@pytest.fixture(scope="function")
def db() -> Session:
    """Create a database session on a freshly created schema"""
    import virtual_doctor.models  # noqa: F401 - registers models with Base.metadata

    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = get_session_local()()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def engine() -> ResponseEngine:
    """Response engine with a seeded random source"""
    return ResponseEngine(rng=random.Random(1234))


@pytest.fixture
def store(engine) -> ConversationStore:
    """Conversation store without idle expiry"""
    return ConversationStore(engine=engine)


@pytest.fixture(scope="function")
def client(db: Session, store: ConversationStore):
    """Create test client with database and conversation store overrides"""
    from fastapi.testclient import TestClient

    from virtual_doctor.main import app

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_conversation_store] = lambda: store
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()
