# market_db/exceptions.py
"""
Service error taxonomy for the data-access layer

Every failure that leaves a repository operation is one of the classes below.
The HTTP layer reads ``http_status`` and ``to_dict()`` to build its response.
"""
from enum import Enum
from typing import Any, Dict, Optional

from .constants import (
    GENERIC_CONFLICT_MESSAGE, GENERIC_CONNECTION_MESSAGE, GENERIC_DATABASE_MESSAGE
)


class ErrorKind(str, Enum):
    """Closed set of error kinds surfaced by the core"""
    CONFIG = "config"
    CONNECTION = "connection"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    DATABASE = "database"


class ServiceError(Exception):
    """Base exception for all service errors"""

    kind: ErrorKind = ErrorKind.DATABASE
    http_status: int = 500
    title: str = "Internal Server Error"

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self):
        if self.original_error:
            return f"{self.message} (Original: {self.original_error})"
        return self.message

    @property
    def public_message(self) -> str:
        """Message that is safe to show to an untrusted caller"""
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.title, "message": self.public_message}


class ConfigError(ServiceError):
    """Required configuration value missing or invalid at startup"""

    kind = ErrorKind.CONFIG
    http_status = 500
    title = "Configuration Error"


class ConnectionError(ServiceError):
    """Pool build or connection acquisition failed"""

    kind = ErrorKind.CONNECTION
    http_status = 503
    title = "Service Unavailable"

    @property
    def public_message(self) -> str:
        return GENERIC_CONNECTION_MESSAGE


class ConflictError(ServiceError):
    """Unique constraint violated on insert or update"""

    kind = ErrorKind.CONFLICT
    http_status = 409
    title = "Conflict"

    def __init__(self, message: str = GENERIC_CONFLICT_MESSAGE, original_error: Exception = None,
                 constraint: Optional[str] = None):
        super().__init__(message, original_error)
        self.constraint = constraint


class NotFoundError(ServiceError):
    """Singular lookup matched zero rows"""

    kind = ErrorKind.NOT_FOUND
    http_status = 404
    title = "Not Found"

    @classmethod
    def for_resource(cls, resource_type: str, resource_id: Any = None) -> "NotFoundError":
        if resource_id is not None:
            return cls(f"{resource_type} with ID '{resource_id}' not found")
        return cls(f"{resource_type} not found")


class ValidationError(ServiceError):
    """Business precondition failed inside a transaction"""

    kind = ErrorKind.VALIDATION
    http_status = 400
    title = "Validation Error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DatabaseError(ServiceError):
    """Any other engine failure. Detail is kept for logs only."""

    kind = ErrorKind.DATABASE
    http_status = 500
    title = "Database Error"

    @property
    def public_message(self) -> str:
        return GENERIC_DATABASE_MESSAGE


ERROR_CLASSES = {
    ErrorKind.CONFIG: ConfigError,
    ErrorKind.CONNECTION: ConnectionError,
    ErrorKind.CONFLICT: ConflictError,
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.VALIDATION: ValidationError,
    ErrorKind.DATABASE: DatabaseError,
}


def is_service_error(error: Exception) -> bool:
    """Check if exception belongs to the service taxonomy"""
    return isinstance(error, ServiceError)
