"""SQLite engine factory and the shared, lock-guarded connection.

The whole service talks to the database through one long-lived Session bound
to a single SQLite connection (StaticPool). Concurrent requests serialize on
one threading.Lock; SharedConnection.acquire() is the only way to reach the
session, and it commits, rolls back and releases on every exit path.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from threadboard.exceptions import ForumError, LockError, StorageError

logger = structlog.get_logger(__name__)

MEMORY_DB_PATH = ":memory:"


def create_db_engine(db_path: str, echo: bool = False) -> Engine:
    """Create a single-connection SQLite engine.

    - StaticPool keeps exactly one DBAPI connection for the engine's lifetime
    - check_same_thread=False lets the threadpool use it under our lock
    - Event listener enables foreign keys on the connection
    - Creates parent directory of db_path if it doesn't exist
    """
    if db_path == MEMORY_DB_PATH:
        url = "sqlite://"
    else:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        url = f"sqlite:///{db_path}"

    engine = create_engine(
        url,
        echo=echo,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragmas(dbapi_connection, connection_record):
        """Set SQLite PRAGMAs on the connection."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()

    return engine


def init_schema(engine: Engine) -> None:
    """Create every table registered on Base.metadata if missing."""
    import threadboard.posts.models  # noqa: F401 -- ensure models registered
    from threadboard.db.base import Base

    Base.metadata.create_all(engine)


class SharedConnection:
    """One Session over one connection, guarded by one mutual-exclusion lock.

    A holder that fails with anything other than a ForumError or a
    SQLAlchemyError (or whose rollback fails) poisons the guard. Every later
    acquire() then raises LockError instead of handing out the session.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session = Session(bind=engine, expire_on_commit=False)
        self._lock = threading.Lock()
        self._poisoned_by: str | None = None

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def poisoned(self) -> bool:
        return self._poisoned_by is not None

    @contextmanager
    def acquire(self) -> Generator[Session, None, None]:
        """Hold the lock and yield the shared session.

        Usage:
            with shared.acquire() as db:
                post = db.get(Post, 1)

        Commits when the block exits normally. SQLAlchemy failures are
        rolled back and re-raised as StorageError.
        """
        with self._lock:
            if self._poisoned_by is not None:
                raise LockError(detail=self._poisoned_by)
            try:
                yield self._session
                self._session.commit()
            except ForumError:
                self._rollback()
                raise
            except SQLAlchemyError as e:
                self._rollback()
                raise StorageError(detail=str(e)) from e
            except BaseException as e:
                self._poison(e)
                raise

    def _rollback(self) -> None:
        try:
            self._session.rollback()
        except SQLAlchemyError as e:
            self._poison(e)
            raise StorageError(
                message="Rollback failed",
                detail=str(e),
            ) from e

    def _poison(self, cause: BaseException) -> None:
        self._poisoned_by = f"{type(cause).__name__}: {cause}"
        logger.error("shared_connection_poisoned", cause=self._poisoned_by)

    def close(self) -> None:
        """Close the session and dispose of the engine."""
        with self._lock:
            self._session.close()
            self._engine.dispose()
        logger.info("shared_connection_closed", url=str(self._engine.url))


def open_shared_connection(db_path: str, echo: bool = False) -> SharedConnection:
    """Create the engine, ensure the schema exists, and wrap it in a guard.

    Raises:
        StorageError: if the database cannot be opened or the schema created.
    """
    try:
        engine = create_db_engine(db_path, echo=echo)
        init_schema(engine)
    except (SQLAlchemyError, OSError) as e:
        raise StorageError(
            message="Failed to open forum database",
            detail=str(e),
        ) from e

    logger.info("shared_connection_opened", db_path=db_path)
    return SharedConnection(engine)
