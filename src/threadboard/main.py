"""Threadboard FastAPI application assembly.

Wires the posts router and opens the shared database connection in the
lifespan.
Run: threadboard  (or: uvicorn threadboard.main:app --reload)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from threadboard import __version__
from threadboard.config import Settings, get_settings
from threadboard.db.connection import open_shared_connection
from threadboard.posts.router import posts_router
from threadboard.posts.store import PostStore

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application. Settings are read at startup when not given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the shared connection on startup, close it on shutdown."""
        resolved = settings or get_settings()
        configure_logging(resolved)
        logger.info("Parsed config: %r", resolved)

        shared = open_shared_connection(resolved.db_path, echo=resolved.debug)
        app.state.shared_connection = shared
        app.state.post_store = PostStore(shared)

        yield

        shared.close()

    app = FastAPI(title="Threadboard", version=__version__, lifespan=lifespan)
    app.include_router(posts_router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn on the configured address."""
    import uvicorn

    settings = get_settings(cli_args=True)
    configure_logging(settings)
    logger.info("Listening on http://%s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
