"""
Monthly profit report and Excel export of a month's bills.
"""

from datetime import date
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from staysync.models import Billing
from staysync.models.base.enums import PaymentStatus, RoomStatus
from staysync.repositories.billing import BillingRepository
from staysync.repositories.expense import ExpenseRepository
from staysync.repositories.room import RoomRepository
from staysync.repositories.utility import CentralMeterRepository
from staysync.schemas.report import ExpenseBreakdown, IncomeBreakdown, MonthlyReport, ReportStats
from staysync.services.base import BaseService
from staysync.utils.date_utils import add_months, format_month
from staysync.utils.excel_utils import ExcelGenerator

EXPORT_HEADERS = [
    "Room",
    "Resident",
    "Rent",
    "Water unit",
    "Water total",
    "Elec unit",
    "Elec total",
    "Internet",
    "Trash",
    "Other",
    "Total",
    "Status",
    "Date",
]


def summarize_income(bills: List[Billing]) -> IncomeBreakdown:
    """Component totals of the given (Paid) bills."""
    income = IncomeBreakdown(paid_bills=len(bills))
    for bill in bills:
        income.rent += bill.room_price
        income.water += bill.water_cost
        income.electric += bill.electric_cost
        income.trash += bill.trash_fee
        income.internet += bill.internet_fee
        income.common += bill.common_fee
        income.other += bill.other_fees
        income.total += bill.total_amount
        income.water_units += bill.water_units
        income.electric_units += bill.electric_units
    return income


class ReportService(BaseService):
    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.bills = BillingRepository(db_session)
        self.rooms = RoomRepository(db_session)
        self.expenses = ExpenseRepository(db_session)
        self.meters = CentralMeterRepository(db_session)

    def monthly_report(self, organization_id: str, month: date) -> MonthlyReport:
        """
        Income from the month's Paid bills against the building's utility
        costs (central meter) and operating expenses.
        """
        bills = self.bills.list_for_month(organization_id, month)
        paid = [bill for bill in bills if bill.payment_status == PaymentStatus.PAID]
        income = summarize_income(paid)

        expenses = ExpenseBreakdown()
        for meter in self.meters.for_month(organization_id, month):
            expenses.water += meter.water_total_cost
            expenses.electric += meter.electric_total_cost
            expenses.trash += meter.trash_cost
            expenses.internet += meter.internet_cost
            expenses.water_units += meter.water_usage
            expenses.electric_units += meter.electric_usage
        expenses.operating = self.expenses.total_between(organization_id, month, add_months(month, 1))
        expenses.total = (
            expenses.water + expenses.electric + expenses.trash + expenses.internet + expenses.operating
        )

        room_counts = self.rooms.count_by_status(organization_id)
        stats = ReportStats(
            total_rooms=sum(room_counts.values()),
            occupied_rooms=room_counts[RoomStatus.OCCUPIED],
            total_bills_issued=len(bills),
            paid_bills=len(paid),
            unpaid_bills=len(bills) - len(paid),
        )
        return MonthlyReport(
            month=format_month(month),
            income=income,
            expenses=expenses,
            net_profit=income.total - expenses.total,
            stats=stats,
        )

    def export_month(self, organization_id: str, month: date) -> bytes:
        """``.xlsx`` workbook listing every bill of the month."""
        bills = self.bills.list_for_month(organization_id, month)
        rows = [
            [
                bill.room_number or "-",
                bill.resident_name or "-",
                bill.room_price,
                bill.water_units,
                bill.water_cost,
                bill.electric_units,
                bill.electric_cost,
                bill.internet_fee,
                bill.trash_fee,
                bill.other_fees + bill.common_fee,
                bill.total_amount,
                PaymentStatus(bill.payment_status).value,
                bill.payment_date.strftime("%Y-%m-%d") if bill.payment_date else "",
            ]
            for bill in bills
        ]
        rows.append(["", "Total", *[""] * 8, sum((bill.total_amount for bill in bills), Decimal("0")), "", ""])

        generator = ExcelGenerator()
        generator.add_worksheet(
            f"Billing {format_month(month)}",
            EXPORT_HEADERS,
            rows,
            title=f"Billing report {format_month(month)}",
        )
        self._logger.info("Billing export generated", extra={"month": format_month(month), "rows": len(bills)})
        return generator.to_bytes()
