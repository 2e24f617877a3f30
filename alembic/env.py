"""Alembic migration runner using the application's SQLite engine factory.

Builds the engine from the same settings the service uses, so foreign keys
and the database path match production.
"""

from logging.config import fileConfig

from alembic import context

# Import all model modules to register them with Base.metadata
import threadboard.posts.models  # noqa: F401
from threadboard.config import get_settings
from threadboard.db.base import Base
from threadboard.db.connection import create_db_engine

# Alembic Config object
config = context.config

# Set up Python logging from the ini file
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Target metadata for autogenerate support
target_metadata = Base.metadata


def run_migrations_online() -> None:
    """Run migrations using the application's engine."""
    engine = create_db_engine(get_settings().db_path)
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,
        )
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


run_migrations_online()
