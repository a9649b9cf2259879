from staysync.services.analytics.dashboard_service import DashboardService
from staysync.services.analytics.report_service import ReportService, summarize_income

__all__ = ["DashboardService", "ReportService", "summarize_income"]
