"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.test_constants import TEST_SECRET_KEY

# Force test DB when pytest runs; don't inherit from .env (avoids polluting profile_api_dev)
_test_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
_test_password = os.getenv("PGPASSWORD", "")
_test_host = os.getenv("PGHOST", "localhost")
_test_port = os.getenv("PGPORT", "5432")
_test_url = (
    f"postgresql+psycopg://{_test_user}:{_test_password}@{_test_host}:{_test_port}/profile_api_test"
)
os.environ["DATABASE_URL"] = _test_url
os.environ["DB_CONNECT_TIMEOUT"] = "3"
os.environ["SECRET_KEY"] = TEST_SECRET_KEY


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from app.main import app

    return TestClient(app)


@pytest.fixture(scope="session")
def _ensure_migrations() -> None:
    """Create test DB if needed and run migrations once per test session.

    Skips database-backed tests when PostgreSQL is not reachable.
    """
    import subprocess
    import sys

    from sqlalchemy import create_engine, text
    from sqlalchemy.exc import OperationalError

    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    # Create test database if it doesn't exist (CREATE DATABASE requires autocommit)
    _create_db_url = (
        f"postgresql+psycopg://{_test_user}:{_test_password}@{_test_host}:{_test_port}/postgres"
    )
    engine = create_engine(_create_db_url, connect_args={"connect_timeout": 3})
    try:
        with engine.connect().execution_options(isolation_level="AUTOCOMMIT") as conn:
            exists = conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = 'profile_api_test'")
            ).first()
            if exists is None:
                conn.execute(text("CREATE DATABASE profile_api_test"))
    except OperationalError as exc:
        pytest.skip(f"PostgreSQL not reachable: {exc.orig}")
    finally:
        engine.dispose()

    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        cwd=project_root,
        capture_output=True,
        text=True,
        timeout=30,
        env=os.environ.copy(),
    )
    assert result.returncode == 0, f"alembic upgrade head failed: {result.stderr}"


@pytest.fixture
def db(_ensure_migrations: None) -> Session:
    """Database session for integration tests. All changes are rolled back after each test."""
    from app.db import engine

    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()
