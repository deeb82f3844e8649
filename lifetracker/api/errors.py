"""Translate service failures into HTTP errors."""

from fastapi import HTTPException, status

from lifetracker.services.errors import (
    ForbiddenError,
    LifeTrackerError,
    NotFoundError,
    ValidationFailure,
)

_STATUS_BY_ERROR: dict[type[LifeTrackerError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    ValidationFailure: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def http_error(e: LifeTrackerError) -> HTTPException:
    """HTTPException carrying the service message and the nearest status code."""
    code = _STATUS_BY_ERROR.get(type(e), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=code, detail=e.message)
