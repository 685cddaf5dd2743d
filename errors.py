"""
Error taxonomy shared by the store, the token service, the notifier and
the HTTP layer.

Every error carries the HTTP status and the fixed message that reaches the
client. Infrastructure detail stays in the logs and in ``__cause__``.
"""

from enum import Enum


class ErrorMessage(str, Enum):
    NOT_FOUND = "Item not found"
    NOTHING_TO_DO = "Empty request - nothing to do"
    DUPLICATE_NAME = "Duplicate item name"
    INVALID_ID = "Invalid id"
    INVALID_NAME = "Invalid name"
    INVALID_DESCRIPTION = "Invalid description"
    INVALID_TYPE = "Invalid type"
    INVALID_REQUEST = "Invalid request"
    DB_ERROR = "DB error"
    JWT_INVALID = "Invalid JWT"
    JWT_ROLE_MISSING = "Access denied"
    JWT_INVALID_METHOD = "Invalid signing method"


class ServiceError(Exception):
    """Base exception for classified service errors."""
    status_code = 500

    def __init__(self, message: ErrorMessage, detail: str = ""):
        super().__init__(detail or message.value)
        self.message = message
        self.detail = detail


class ValidationError(ServiceError):
    """Raised when the client sent something it can fix."""
    status_code = 400


class AuthError(ServiceError):
    """Raised when a bearer token is missing, invalid or lacks a role."""
    status_code = 403


class NotFoundError(ServiceError):
    """Raised when no company exists for the given id."""
    status_code = 404

    def __init__(self, detail: str = ""):
        super().__init__(ErrorMessage.NOT_FOUND, detail)


class ConflictError(ServiceError):
    """Raised when a company name is already taken."""
    status_code = 400

    def __init__(self, detail: str = ""):
        super().__init__(ErrorMessage.DUPLICATE_NAME, detail)


class InfrastructureError(ServiceError):
    """Raised for unclassified store or broker failures."""
    status_code = 500

    def __init__(self, detail: str = ""):
        super().__init__(ErrorMessage.DB_ERROR, detail)


class NotificationError(InfrastructureError):
    """Raised when a change event could not be published."""
    pass
