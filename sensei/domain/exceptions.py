"""Domain exceptions for Sensei repository access.

These exceptions represent failures of the revision/diff layer. They should
be caught at the application boundary (CLI, API) and converted to
appropriate user-facing error messages. Nothing in the core retries or
rolls back after one of these is raised.
"""


class SenseiDomainError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class NotFoundError(SenseiDomainError):
    """Raised when a path or revision does not exist in the read target."""

    pass


class ResolutionError(NotFoundError):
    """Raised when a revision string does not name any reachable snapshot."""

    pass


class StorageError(SenseiDomainError):
    """Raised when the underlying storage engine or filesystem fails."""

    pass
