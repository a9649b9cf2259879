"""
Dashboard summary: revenue, outstanding balance, occupancy and issues.
"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from staysync.config.settings import Settings
from staysync.models.base.enums import PaymentStatus, RoomStatus
from staysync.repositories.billing import BillingRepository
from staysync.repositories.issue import IssueRepository
from staysync.repositories.room import RoomRepository
from staysync.schemas.report import DashboardSummary, RevenuePoint
from staysync.services.base import BaseService, CacheService
from staysync.utils.date_utils import format_month, month_bounds, months_back, today as utc_today

TREND_MONTHS = 6


class DashboardService(BaseService):
    """
    Builds the dashboard summary.

    Summaries are cached per organization for ``DASHBOARD_CACHE_TTL``
    seconds, so figures may lag writes by up to that long.
    """

    def __init__(self, db_session: Session, settings: Settings, cache: CacheService):
        super().__init__(db_session)
        self.settings = settings
        self.cache = cache
        self.bills = BillingRepository(db_session)
        self.rooms = RoomRepository(db_session)
        self.issues = IssueRepository(db_session)

    @staticmethod
    def cache_key(organization_id: str) -> str:
        return f"dashboard:{organization_id}"

    def get_summary(self, organization_id: str, today: Optional[date] = None) -> DashboardSummary:
        cached = self.cache.get_or_set(
            self.cache_key(organization_id),
            lambda: self.build_summary(organization_id, today).model_dump(mode="json"),
            self.settings.DASHBOARD_CACHE_TTL,
        )
        return DashboardSummary.model_validate(cached)

    def invalidate(self, organization_id: str) -> None:
        self.cache.delete(self.cache_key(organization_id))

    def build_summary(self, organization_id: str, today: Optional[date] = None) -> DashboardSummary:
        today = today or utc_today()

        start, end = month_bounds(today)
        room_counts = self.rooms.count_by_status(organization_id)
        total_rooms = sum(room_counts.values())
        occupied = room_counts[RoomStatus.OCCUPIED]

        trend = []
        for month in months_back(today, TREND_MONTHS):
            month_start, month_end = month_bounds(month)
            trend.append(
                RevenuePoint(
                    month=format_month(month),
                    revenue=self.bills.paid_total_between(organization_id, month_start, month_end),
                )
            )

        summary = DashboardSummary(
            revenue_this_month=self.bills.paid_total_between(organization_id, start, end),
            outstanding=self.bills.outstanding_total(organization_id),
            pending_count=self.bills.count_by_status(organization_id, PaymentStatus.PENDING),
            review_count=self.bills.count_by_status(organization_id, PaymentStatus.REVIEW),
            total_rooms=total_rooms,
            occupied_rooms=occupied,
            available_rooms=room_counts[RoomStatus.AVAILABLE],
            reserved_rooms=room_counts[RoomStatus.RESERVED],
            occupancy_rate=round(occupied / total_rooms * 100, 2) if total_rooms else 0.0,
            active_issues=self.issues.count_active(organization_id),
            revenue_trend=trend,
        )
        self._logger.debug("Dashboard summary built", extra={"organization_id": organization_id})
        return summary
