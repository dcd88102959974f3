"""
Pytest configuration and shared fixtures.

Environment variables are set before anything under app/ is imported,
because app.config builds its Settings singleton at import time.

- SQLite file database recreated for every test
- fast scrypt parameters for gate / HTTP tests
- controllable clock
- admin token helper
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator

import pytest

_tmp_dir = Path(tempfile.mkdtemp(prefix="burnote-tests-"))

os.environ["DATABASE_URL"] = f"sqlite:///{_tmp_dir / 'test.db'}"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["ADMIN_PASSWORD"] = "admin-test-password"
os.environ["LOG_DIR"] = str(_tmp_dir / "logs")
os.environ["DEBUG"] = "false"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from app.core.security import CredentialCodec, ScryptParams  # noqa: E402
from app.database import Base, SessionLocal, engine  # noqa: E402
from app.models.share import Share  # noqa: E402,F401
from app.services.share_gate import ShareGate  # noqa: E402
from app.services.share_store import ShareStore  # noqa: E402

ADMIN_PASSWORD = "admin-test-password"

# Cheap scrypt cost; stored per record, so verification uses the same cost
FAST_PARAMS = ScryptParams(n=1024, r=8, p=1, keylen=64)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def database():
    """Fresh schema for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# Core Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def fast_codec() -> CredentialCodec:
    return CredentialCodec(params=FAST_PARAMS, max_concurrency=8)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(db_session) -> ShareStore:
    return ShareStore(db_session)


@pytest.fixture
def gate(store, fast_codec, clock) -> ShareGate:
    return ShareGate(store=store, codec=fast_codec, clock=clock)


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app(fast_codec):
    """FastAPI application with the fast codec injected."""
    from main import app as fastapi_app
    from app.api.deps import get_credential_codec

    fastapi_app.dependency_overrides[get_credential_codec] = lambda: fast_codec
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client) -> dict:
    """Authorization header with a real admin token from /api/admin/login."""
    response = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
