"""Mapping of domain errors to HTTP responses"""
from fastapi import HTTPException, status
from helpdesk.domain.exceptions import (
    ConflictError,
    ForbiddenError,
    HelpdeskError,
    NotFoundError,
    TicketReadOnlyError,
    UnauthorizedError,
    ValidationError,
)

STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (TicketReadOnlyError, status.HTTP_423_LOCKED),
)


def http_error(error: HelpdeskError) -> HTTPException:
    """Build the HTTPException for a domain error"""
    status_code = status.HTTP_400_BAD_REQUEST
    for error_cls, code in STATUS_BY_ERROR:
        if isinstance(error, error_cls):
            status_code = code
            break

    detail = error.message
    if isinstance(error, ValidationError) and error.issues:
        detail = {"error": error.message, "issues": error.issues}

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return HTTPException(status_code=status_code, detail=detail, headers=headers)
