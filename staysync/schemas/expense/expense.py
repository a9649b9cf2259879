"""
Expense and recurring expense schemas.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from staysync.schemas.common.base import BaseResponseSchema, BaseSchema, NonNegativeMoney

__all__ = [
    "ExpenseCreate",
    "ExpenseResponse",
    "RecurringExpenseCreate",
    "RecurringExpenseUpdate",
    "RecurringExpenseResponse",
    "RecurringRunResponse",
]


class ExpenseCreate(BaseSchema):
    title: str = Field(..., min_length=1, max_length=200)
    amount: NonNegativeMoney
    category: str = Field(default="Other", max_length=50)
    expense_date: Optional[date] = None
    note: Optional[str] = None


class ExpenseResponse(BaseResponseSchema):
    title: str
    amount: Decimal
    category: str
    expense_date: date
    note: Optional[str] = None


class RecurringExpenseCreate(BaseSchema):
    title: str = Field(..., min_length=1, max_length=200)
    amount: NonNegativeMoney
    category: str = Field(default="Other", max_length=50)
    note: Optional[str] = None
    day_of_month: int = Field(default=1, ge=1, le=31)
    is_active: bool = True


class RecurringExpenseUpdate(BaseSchema):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    amount: Optional[NonNegativeMoney] = None
    category: Optional[str] = Field(default=None, max_length=50)
    note: Optional[str] = None
    day_of_month: Optional[int] = Field(default=None, ge=1, le=31)
    is_active: Optional[bool] = None


class RecurringExpenseResponse(BaseResponseSchema):
    title: str
    amount: Decimal
    category: str
    note: Optional[str] = None
    day_of_month: int
    is_active: bool


class RecurringRunResponse(BaseSchema):
    success: bool = True
    created: int
    expense_ids: List[str] = []
