from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.models import User
from staysync.models.base.enums import AuditAction
from staysync.schemas.common import MessageResponse
from staysync.schemas.expense import RecurringExpenseCreate, RecurringExpenseResponse, RecurringExpenseUpdate
from staysync.services.audit import AuditContext, AuditService
from staysync.services.expense import RecurringExpenseService

router = APIRouter(prefix="/recurring-expenses", tags=["expenses"])


@router.get("", response_model=List[RecurringExpenseResponse])
def list_templates(
    current_user: User = Depends(deps.require_permission("expenses", "read")),
    db: Session = Depends(deps.get_db),
):
    return RecurringExpenseService(db).list_templates(current_user.organization_id)


@router.post("", response_model=RecurringExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_template(
    payload: RecurringExpenseCreate,
    current_user: User = Depends(deps.require_permission("expenses", "create")),
    db: Session = Depends(deps.get_db),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
):
    template = RecurringExpenseService(db).create_template(current_user.organization_id, payload)
    audit.log(context, AuditAction.CREATE, "RecurringExpense", template.id, payload.model_dump())
    return template


@router.get("/{template_id}", response_model=RecurringExpenseResponse)
def get_template(
    template_id: str,
    current_user: User = Depends(deps.require_permission("expenses", "read")),
    db: Session = Depends(deps.get_db),
):
    return RecurringExpenseService(db).get_template(current_user.organization_id, template_id)


@router.patch("/{template_id}", response_model=RecurringExpenseResponse)
def update_template(
    template_id: str,
    payload: RecurringExpenseUpdate,
    current_user: User = Depends(deps.require_permission("expenses", "update")),
    db: Session = Depends(deps.get_db),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
):
    template, diff = RecurringExpenseService(db).update_template(current_user.organization_id, template_id, payload)
    if diff:
        audit.log(context, AuditAction.UPDATE, "RecurringExpense", template.id, diff)
    return template


@router.delete("/{template_id}", response_model=MessageResponse)
def delete_template(
    template_id: str,
    current_user: User = Depends(deps.require_permission("expenses", "delete")),
    db: Session = Depends(deps.get_db),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
):
    template = RecurringExpenseService(db).delete_template(current_user.organization_id, template_id)
    audit.log(context, AuditAction.DELETE, "RecurringExpense", template.id, {"title": template.title})
    return MessageResponse(message="Recurring expense deleted")
