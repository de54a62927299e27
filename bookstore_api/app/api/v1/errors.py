"""Translation of service errors into HTTP responses."""

from fastapi import HTTPException, status

from bookstore_api.app.core.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    ServiceError,
    StoreError,
)


def to_http_exception(error: ServiceError) -> HTTPException:
    """Map a service error onto the matching status code.

    Illegal state changes are reported as 400 like any other bad
    request.  Store failures carry a generic message; the driver error
    has already been logged by the service.
    """
    if isinstance(error, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, (InvalidInputError, ConflictError)):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, StoreError):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=status_code, detail=str(error))
