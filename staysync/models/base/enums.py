"""
Database enums.

String valued enums shared by models, schemas and services. Values are the
literal strings stored in the database and returned over the API.
"""

import enum


class UserRole(str, enum.Enum):
    """User role within an organization."""
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    STAFF = "STAFF"
    TENANT = "TENANT"


class UserStatus(str, enum.Enum):
    ACTIVE = "Active"
    SUSPENDED = "Suspended"


class RoomStatus(str, enum.Enum):
    """Room occupancy status."""
    AVAILABLE = "Available"
    OCCUPIED = "Occupied"
    RESERVED = "Reserved"


class ResidentStatus(str, enum.Enum):
    ACTIVE = "Active"
    CHECKED_OUT = "CheckedOut"


class DepositStatus(str, enum.Enum):
    """Lifecycle of the security deposit."""
    HELD = "Held"
    RETURNED = "Returned"
    FORFEITED = "Forfeited"


class PaymentStatus(str, enum.Enum):
    """Bill payment status."""
    PENDING = "Pending"
    REVIEW = "Review"
    PAID = "Paid"


class IssueStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    DONE = "Done"


class BookingStatus(str, enum.Enum):
    """Booking request status."""
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"


class ConversationState(str, enum.Enum):
    """Chat-bot conversation state per LINE user."""
    IDLE = "IDLE"
    REPAIR_DESC = "REPAIR_DESC"


class AuditAction(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    INVITE_USER = "INVITE_USER"
    CHANGE_ROLE = "CHANGE_ROLE"
    CHANGE_PASSWORD = "CHANGE_PASSWORD"
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"
    PAYMENT = "PAYMENT"
    RESTORE = "RESTORE"


class ExpenseCategory(str, enum.Enum):
    WATER = "Water"
    ELECTRIC = "Electric"
    INTERNET = "Internet"
    MAINTENANCE = "Maintenance"
    SALARY = "Salary"
    OTHER = "Other"


__all__ = [
    "UserRole",
    "UserStatus",
    "RoomStatus",
    "ResidentStatus",
    "DepositStatus",
    "PaymentStatus",
    "IssueStatus",
    "BookingStatus",
    "ConversationState",
    "AuditAction",
    "ExpenseCategory",
]
