"""Database layer: SQLite engine, base model, shared lock-guarded connection."""

from threadboard.db.base import Base
from threadboard.db.connection import (
    SharedConnection,
    create_db_engine,
    init_schema,
    open_shared_connection,
)

__all__ = [
    "Base",
    "SharedConnection",
    "create_db_engine",
    "init_schema",
    "open_shared_connection",
]
