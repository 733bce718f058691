"""
Domain errors raised by the service layer.

Route handlers translate these into HTTPException responses.
"""
from fastapi import status


class JobBoardError(Exception):
    """Base class for errors that map onto an HTTP response."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidRequest(JobBoardError):
    """Malformed identifier, missing field or bad value."""
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(JobBoardError):
    """Business-rule rejection: duplicate job, duplicate or missing application."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(JobBoardError):
    status_code = status.HTTP_404_NOT_FOUND


class PermissionDenied(JobBoardError):
    status_code = status.HTTP_403_FORBIDDEN


class UpstreamServiceError(JobBoardError):
    """The image host failed or answered without a usable URL."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
