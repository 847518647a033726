# app/core/errors.py
from fastapi import HTTPException, status


class DomainError(HTTPException):
    """
    Base class for the recoverable outcomes of the lifecycle operations.
    Being an HTTPException, it surfaces directly from routes; `code` lets
    callers tell the kinds apart without parsing the message.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    code = "error"

    def __init__(self, detail: str):
        super().__init__(status_code=self.status_code, detail=detail)


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class InvalidTransition(DomainError):
    status_code = status.HTTP_409_CONFLICT
    code = "invalid_transition"


class CapacityExceeded(DomainError):
    status_code = status.HTTP_409_CONFLICT
    code = "capacity_exceeded"


class Conflict(DomainError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class ValidationError(DomainError):
    status_code = 422
    code = "validation_error"
