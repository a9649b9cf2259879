"""
SQLAlchemy models.

Importing this package registers every table on ``Base.metadata``.
"""

from staysync.models.base import Base, BaseModel
from staysync.models.organization import Organization
from staysync.models.user import User
from staysync.models.system import SystemConfig
from staysync.models.room import Room
from staysync.models.resident import Resident
from staysync.models.billing import Billing
from staysync.models.expense import Expense, RecurringExpense
from staysync.models.issue import Issue
from staysync.models.booking import Booking
from staysync.models.utility import CentralMeter
from staysync.models.communication import LineBotState
from staysync.models.audit import AuditLog

__all__ = [
    "Base",
    "BaseModel",
    "Organization",
    "User",
    "SystemConfig",
    "Room",
    "Resident",
    "Billing",
    "Expense",
    "RecurringExpense",
    "Issue",
    "Booking",
    "CentralMeter",
    "LineBotState",
    "AuditLog",
]
