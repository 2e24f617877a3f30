"""Application configuration.

Loads settings from command-line flags (when asked to), environment variables
with THREADBOARD_ prefix, or a .env file in the working directory.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Threadboard application settings."""

    db_path: str = "forum.db"
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_prefix": "THREADBOARD_",
    }

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Reject an empty database path and out-of-range ports."""
        if not self.db_path.strip():
            raise ValueError(
                "Database path must not be empty. "
                "Use ':memory:' for a throwaway in-memory database."
            )
        if not 1 <= self.port <= 65535:
            raise ValueError(f"Port must be between 1 and 65535, got {self.port}")
        return self


def get_settings(cli_args: list[str] | bool = False) -> Settings:
    """Create and return a Settings instance.

    cli_args=True parses sys.argv (e.g. --port 8080 --db_path forum.db); a list
    is parsed instead of sys.argv. Flags take precedence over the environment.

    Raises a clear error message if an environment variable cannot be parsed.
    """
    try:
        return Settings(_cli_parse_args=cli_args)
    except Exception as e:
        raise RuntimeError(
            f"Failed to load threadboard settings: {e}\n"
            "Check the THREADBOARD_* environment variables or the .env file."
        ) from e
