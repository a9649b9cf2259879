"""
Monthly profit report and the Excel billing export.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.models import User
from staysync.schemas.common import MONTH_PATTERN
from staysync.schemas.report import MonthlyReport
from staysync.services.analytics import ReportService
from staysync.utils.date_utils import format_month, month_start, parse_month, today

router = APIRouter(prefix="/reports", tags=["reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/monthly", response_model=MonthlyReport)
def monthly_report(
    month: Optional[str] = Query(default=None, pattern=MONTH_PATTERN, description="YYYY-MM, defaults to the current month"),
    current_user: User = Depends(deps.require_permission("reports", "read")),
    db: Session = Depends(deps.get_db),
):
    period = parse_month(month) or month_start(today())
    return ReportService(db).monthly_report(current_user.organization_id, period)


@router.get("/export")
def export_report(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=9999),
    current_user: User = Depends(deps.require_permission("reports", "read")),
    db: Session = Depends(deps.get_db),
):
    period = date(year, month, 1)
    content = ReportService(db).export_month(current_user.organization_id, period)
    filename = f"billing-{format_month(period)}.xlsx"
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
