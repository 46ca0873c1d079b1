"""
Exceptions raised by services and API endpoints.

Every error is an `HTTPException` so it can propagate unchanged from the
service layer to the client.
"""

from fastapi import HTTPException, status

__all__ = [
    "not_authenticated",
    "PermissionDenied",
    "NotFound",
    "Conflict",
    "DatabaseError",
]

not_authenticated = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Not authenticated.",
)


class PermissionDenied(HTTPException):
    """The caller lacks the role required for the action."""

    def __init__(self, detail: str = "You do not have permissions to perform this action."):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    """A referenced user, group or operation does not exist."""

    def __init__(self, detail: str = "The requested resource could not be found."):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class Conflict(HTTPException):
    """The resource cannot be created because its slug is already taken."""

    def __init__(self, detail: str = "A resource with this slug already exists."):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class DatabaseError(HTTPException):
    """
    A storage failure. Raise it `from` the original psycopg error so the
    cause stays available for diagnostics.
    """

    def __init__(self, detail: str = "A database error occurred."):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
