"""
Error taxonomy shared by all features.

Each error is an `HTTPException` bound to one status code, so services can
raise them directly and FastAPI renders `{"detail": "..."}` to the client.
None of them are retried; they are expected outcomes of bad input or
unauthorized actions.
"""

from __future__ import annotations

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    def __init__(self, detail: str = "The given data was invalid.") -> None:
        super().__init__(status_code=422, detail=detail)


class AuthenticationError(HTTPException):
    def __init__(self, detail: str = "Unauthenticated.") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(HTTPException):
    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Not found.") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str = "Conflict.") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)
