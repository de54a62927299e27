"""
Exceptions raised by the service layer.

Services never raise ``HTTPException`` themselves; endpoints translate
these errors into HTTP responses.  All of them derive from
``ValueError`` so callers that only care about "the request was bad"
can catch a single type.
"""


class ServiceError(ValueError):
    """Base class for errors reported by services."""


class InvalidInputError(ServiceError):
    """A required field is missing or malformed."""


class NotFoundError(ServiceError):
    """The requested document does not exist."""


class ConflictError(ServiceError):
    """The document is in a state that forbids the requested change."""


class InvalidTransitionError(ConflictError):
    """An order status change outside the permitted transitions."""


class StoreError(ServiceError):
    """The document store failed.  The message is safe to show to clients."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
