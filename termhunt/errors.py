"""
Error taxonomy for the voting and ranking service.

Each error is an ``HTTPException`` so services can raise it directly and
FastAPI renders ``{"detail": ...}`` with the matching status code.
"""

from typing import Optional

from fastapi import HTTPException, status


class TermhuntError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class NotFound(TermhuntError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class Unauthenticated(TermhuntError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"


class Forbidden(TermhuntError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not allowed"


class Conflict(TermhuntError):
    """Uniqueness constraint still violated after all retries."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflicting concurrent update, please retry"
