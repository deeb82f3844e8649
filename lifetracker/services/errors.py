"""Service-level failures; the API layer maps each to an HTTP status."""


class LifeTrackerError(Exception):
    """Base for expected service failures (carries a client-safe message)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(LifeTrackerError):
    """The referenced category, item, sub-item, entry or user does not exist."""


class ForbiddenError(LifeTrackerError):
    """The caller is authenticated but not allowed to touch this record."""


class ValidationFailure(LifeTrackerError):
    """The request is well-formed but its values are not acceptable."""
