"""
Custom Exceptions for the Dormitory Management Application

This module defines custom exception classes used throughout the application
for consistent error handling. Every exception carries an HTTP status code and
is rendered by the handlers in ``staysync.core.error_handlers``.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Authentication & Authorization
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_INVALID = "TOKEN_INVALID"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_FORMAT = "INVALID_FORMAT"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Business logic errors
    CONFLICT = "CONFLICT"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    ROOM_UNAVAILABLE = "ROOM_UNAVAILABLE"
    ROOM_IN_USE = "ROOM_IN_USE"

    # Entity specific not-found codes
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    RESIDENT_NOT_FOUND = "RESIDENT_NOT_FOUND"
    BILLING_NOT_FOUND = "BILLING_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # External service errors
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"

    # Backup
    BACKUP_FORMAT_ERROR = "BACKUP_FORMAT_ERROR"
    BACKUP_RESTORE_FAILED = "BACKUP_RESTORE_FAILED"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the JSON error body returned to clients"""
        body: Dict[str, Any] = {
            "error": self.message,
            "code": self.error_code.value,
        }
        if self.details:
            body["details"] = self.details
        return body

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# Validation
# ========================================

class ValidationError(BaseAppException):
    """Exception raised for malformed or out-of-range input"""

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        field_errors: Optional[Dict[str, List[str]]] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = dict(details or {})
        if field:
            details["field"] = field
        if field_errors:
            details["field_errors"] = field_errors
        super().__init__(
            message=message,
            error_code=ErrorCode.VALIDATION_ERROR,
            details=details,
            status_code=400,
        )


# ========================================
# Not Found
# ========================================

class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[Any] = None,
        error_code: ErrorCode = ErrorCode.RESOURCE_NOT_FOUND,
        message: Optional[str] = None,
    ):
        details = {"resource_type": resource_type}
        if resource_id is not None:
            details["resource_id"] = str(resource_id)
        super().__init__(
            message=message or f"{resource_type} not found",
            error_code=error_code,
            details=details,
            status_code=404,
        )


class RoomNotFoundError(ResourceNotFoundError):
    def __init__(self, room_id: Optional[Any] = None):
        super().__init__("Room", room_id, ErrorCode.ROOM_NOT_FOUND)


class ResidentNotFoundError(ResourceNotFoundError):
    def __init__(self, resident_id: Optional[Any] = None, message: Optional[str] = None):
        super().__init__("Resident", resident_id, ErrorCode.RESIDENT_NOT_FOUND, message)


class BillingNotFoundError(ResourceNotFoundError):
    def __init__(self, billing_id: Optional[Any] = None):
        super().__init__("Bill", billing_id, ErrorCode.BILLING_NOT_FOUND)


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: Optional[Any] = None):
        super().__init__("User", user_id, ErrorCode.USER_NOT_FOUND)


# ========================================
# Conflicts
# ========================================

class ConflictError(BaseAppException):
    """Exception raised when an operation conflicts with current state"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFLICT,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=409,
        )


class DuplicateEntryError(ConflictError):
    """Exception raised when a unique value is already taken"""

    def __init__(self, entity: str, field: str, value: Any):
        super().__init__(
            message=f"{entity} with {field} '{value}' already exists",
            error_code=ErrorCode.DUPLICATE_ENTRY,
            details={"entity": entity, "field": field},
        )


class InvalidStateTransitionError(ConflictError):
    """Exception raised when a state machine guard rejects an event"""

    def __init__(self, message: str, current_state: Optional[str] = None, event: Optional[str] = None):
        details = {}
        if current_state is not None:
            details["current_state"] = current_state
        if event is not None:
            details["event"] = event
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_STATE_TRANSITION,
            details=details,
        )


# ========================================
# Authentication & Authorization
# ========================================

class AuthenticationError(BaseAppException):
    """Exception raised when authentication fails"""

    def __init__(self, message: str = "Unauthorized", error_code: ErrorCode = ErrorCode.AUTHENTICATION_FAILED):
        super().__init__(message=message, error_code=error_code, status_code=401)


class AuthorizationError(BaseAppException):
    """Exception raised when the caller lacks permission"""

    def __init__(self, message: str = "Forbidden", required: Optional[str] = None):
        details = {"required": required} if required else None
        super().__init__(
            message=message,
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            details=details,
            status_code=403,
        )


# ========================================
# External services and backup
# ========================================

class ExternalServiceError(BaseAppException):
    """Exception raised when an external API call fails"""

    def __init__(self, service: str, message: str, status: Optional[int] = None):
        details: Dict[str, Any] = {"service": service}
        if status is not None:
            details["upstream_status"] = status
        super().__init__(
            message=message,
            error_code=ErrorCode.EXTERNAL_SERVICE_ERROR,
            details=details,
            status_code=502,
        )


class BackupFormatError(BaseAppException):
    def __init__(self, message: str = "Invalid backup format"):
        super().__init__(message=message, error_code=ErrorCode.BACKUP_FORMAT_ERROR, status_code=400)


class BackupRestoreError(BaseAppException):
    def __init__(self, message: str, completed: List[str], failed_table: str):
        super().__init__(
            message=message,
            error_code=ErrorCode.BACKUP_RESTORE_FAILED,
            details={"completed_steps": completed, "failed_table": failed_table},
            status_code=500,
        )


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "ValidationError",
    "ResourceNotFoundError",
    "RoomNotFoundError",
    "ResidentNotFoundError",
    "BillingNotFoundError",
    "UserNotFoundError",
    "ConflictError",
    "DuplicateEntryError",
    "InvalidStateTransitionError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "BackupFormatError",
    "BackupRestoreError",
]
