"""Test fixtures for threadboard.

Every test gets its own in-memory SQLite database so no state leaks
between tests. Service-level tests use a plain Session; store-level tests
go through the lock-guarded SharedConnection like production does.
"""

import pytest
from sqlalchemy.orm import Session

from threadboard.db.connection import (
    MEMORY_DB_PATH,
    create_db_engine,
    init_schema,
    open_shared_connection,
)
from threadboard.posts import service
from threadboard.posts.store import PostStore


@pytest.fixture
def test_engine():
    """Create an in-memory engine with all tables."""
    engine = create_db_engine(MEMORY_DB_PATH)
    init_schema(engine)

    yield engine

    engine.dispose()


@pytest.fixture
def db_session(test_engine):
    """Create a database session for service-level tests."""
    session = Session(bind=test_engine, expire_on_commit=False)

    yield session

    session.close()


@pytest.fixture
def shared_connection():
    """Open the lock-guarded shared connection on a fresh in-memory database."""
    shared = open_shared_connection(MEMORY_DB_PATH)

    yield shared

    shared.close()


@pytest.fixture
def store(shared_connection):
    """PostStore over the shared connection."""
    return PostStore(shared_connection)


@pytest.fixture
def sample_root(db_session):
    """Create a root post: 'alice' asking about sourdough."""
    return service.create_root(db_session, "alice", "How do I keep a sourdough starter alive?")
