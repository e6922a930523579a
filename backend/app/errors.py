"""Domain error taxonomy.

Errors that reach a caller are ``HTTPException`` subclasses so services can
raise them directly and FastAPI renders the status code. Delivery failures
never reach a caller; the notification dispatcher logs them.
"""
from typing import Any

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    def __init__(self, detail: Any):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UnauthorizedError(HTTPException):
    def __init__(self, detail: Any = "Not authenticated"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class ForbiddenError(HTTPException):
    def __init__(self, detail: Any = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: Any):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: Any):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class BatchTimeoutError(HTTPException):
    def __init__(self, detail: Any = "Batch save timed out, please retry"):
        super().__init__(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=detail)


class NotificationDeliveryError(Exception):
    """Outbound chat message could not be delivered."""
