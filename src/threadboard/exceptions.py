"""Threadboard exception hierarchy.

All exceptions inherit from ForumError and carry a three-part structure:
message (what happened), detail (technical context), suggestion (what to do next).

Boundary mapping: ValidationError and PostNotFoundError are client faults,
StorageError and LockError are server faults.
"""


class ForumError(Exception):
    """Base exception for all threadboard errors."""

    def __init__(
        self,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.detail:
            parts.append(f"Detail: {self.detail}")
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return " | ".join(parts)


class ValidationError(ForumError):
    """Raised when author or message is empty after trimming whitespace."""

    def __init__(
        self,
        message: str = "Validation error",
        detail: str | None = None,
        suggestion: str | None = "Provide a non-empty author and message",
    ) -> None:
        super().__init__(message, detail, suggestion)


class PostNotFoundError(ForumError):
    """Raised when a post cannot be found.

    Also raised by soft delete when the post is already deleted; the store
    does not tell the two apart.
    """

    def __init__(
        self,
        post_id: int | None = None,
        message: str = "Post not found",
        detail: str | None = None,
        suggestion: str | None = "Check the post ID",
    ) -> None:
        self.post_id = post_id
        if detail is None and post_id is not None:
            detail = f"Unknown post ID: {post_id}"
        super().__init__(message, detail, suggestion)


class StorageError(ForumError):
    """Error related to database operations. Wraps the underlying cause."""

    def __init__(
        self,
        message: str = "A database error occurred",
        detail: str | None = None,
        suggestion: str | None = "Check the database file path and permissions",
    ) -> None:
        super().__init__(message, detail, suggestion)


class LockError(ForumError):
    """Raised when the shared connection lock was poisoned by a failed holder.

    Not retryable: the connection may be in an inconsistent state and the
    process should be restarted.
    """

    def __init__(
        self,
        message: str = "Lock poisoned",
        detail: str | None = None,
        suggestion: str | None = "Restart the service to reopen the database connection",
    ) -> None:
        super().__init__(message, detail, suggestion)
