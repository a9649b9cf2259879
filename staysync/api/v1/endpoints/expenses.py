from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.models import User
from staysync.models.base.enums import AuditAction
from staysync.schemas.common import MessageResponse
from staysync.schemas.expense import ExpenseCreate, ExpenseResponse
from staysync.services.audit import AuditContext, AuditService
from staysync.services.expense import ExpenseService

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("", response_model=List[ExpenseResponse])
def list_expenses(
    limit: int = Query(default=100, ge=1, le=500),
    current_user: User = Depends(deps.require_permission("expenses", "read")),
    db: Session = Depends(deps.get_db),
):
    return ExpenseService(db).list_expenses(current_user.organization_id, limit=limit)


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense(
    payload: ExpenseCreate,
    current_user: User = Depends(deps.require_permission("expenses", "create")),
    db: Session = Depends(deps.get_db),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
):
    expense = ExpenseService(db).create_expense(current_user.organization_id, payload)
    audit.log(context, AuditAction.CREATE, "Expense", expense.id, {"title": expense.title, "amount": expense.amount})
    return expense


@router.delete("/{expense_id}", response_model=MessageResponse)
def delete_expense(
    expense_id: str,
    current_user: User = Depends(deps.require_permission("expenses", "delete")),
    db: Session = Depends(deps.get_db),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
):
    expense = ExpenseService(db).delete_expense(current_user.organization_id, expense_id)
    audit.log(context, AuditAction.DELETE, "Expense", expense.id, {"title": expense.title, "amount": expense.amount})
    return MessageResponse(message="Expense deleted")
